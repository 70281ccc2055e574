import os
import re
import uuid

import pytest

from taco_cloud.errors import StorageError
from taco_cloud.models import Ingredient, IngredientType, Taco, User, next_timestamp
from taco_cloud.repositories.interfaces import (
    IIngredientRepository, IOrderRepository, ITacoRepository, IUserRepository,
)

from conftest import placed_order


def _taco(repo, name, *ingredients):
    return repo.save(Taco(name=name, ingredients=list(ingredients), created_at=next_timestamp()))


def _user(repo, username):
    return repo.save(User(username=username, password='x', fullname=username.title()))


def test_repositories_implement_protocols(container):
    assert isinstance(container.ingredient_repo, IIngredientRepository)
    assert isinstance(container.taco_repo, ITacoRepository)
    assert isinstance(container.order_repo, IOrderRepository)
    assert isinstance(container.user_repo, IUserRepository)


# ═══════════════════════════════════════════════════════════════════════════
# INGREDIENTES
# ═══════════════════════════════════════════════════════════════════════════

def test_ingredient_save_and_find(container):
    repo = container.ingredient_repo
    assert repo.count() == 0
    assert repo.find_all() == []

    repo.save(Ingredient('FLTO', 'Flour Tortilla', IngredientType.WRAP))
    repo.save(Ingredient('GRBF', 'Ground Beef', IngredientType.PROTEIN))

    assert repo.count() == 2
    assert repo.find_by_id('GRBF') == Ingredient('GRBF', 'Ground Beef', IngredientType.PROTEIN)
    assert repo.find_by_id('NOPE') is None
    assert sorted(i.id for i in repo.find_all()) == ['FLTO', 'GRBF']


# ═══════════════════════════════════════════════════════════════════════════
# TACOS
# ═══════════════════════════════════════════════════════════════════════════

def test_taco_save_assigns_id_and_keeps_ingredient_order(container):
    repo = container.taco_repo
    saved = _taco(repo, 'Beef Taco', 'GRBF', 'FLTO', 'CHED')
    assert saved.id is not None

    found = repo.find_by_id(saved.id)
    assert found.name == 'Beef Taco'
    assert found.ingredients == ['GRBF', 'FLTO', 'CHED']
    assert found.created_at == saved.created_at


def test_taco_find_by_id_accepts_string_ids(container):
    saved = _taco(container.taco_repo, 'Beef Taco', 'FLTO')
    assert container.taco_repo.find_by_id(str(saved.id)).name == 'Beef Taco'


def test_taco_find_unknown_returns_none(container):
    assert container.taco_repo.find_by_id('does-not-exist') is None
    assert container.taco_repo.find_by_id(None) is None


def test_taco_find_recent_empty(container):
    assert container.taco_repo.find_recent(12) == []


def test_taco_find_recent_is_descending_and_limited(container):
    repo = container.taco_repo
    for i in range(5):
        _taco(repo, f'Taco {i}', 'FLTO')

    recent = repo.find_recent(3)
    assert [t.name for t in recent] == ['Taco 4', 'Taco 3', 'Taco 2']
    assert repo.find_recent(0) == []


def test_taco_find_recent_breaks_timestamp_ties_by_id(container):
    repo = container.taco_repo
    when = next_timestamp()
    first = repo.save(Taco(name='A', ingredients=['FLTO'], created_at=when))
    second = repo.save(Taco(name='B', ingredients=['COTO'], created_at=when))

    expected = sorted([str(first.id), str(second.id)], reverse=True)
    assert [str(t.id) for t in repo.find_recent(2)] == expected
    assert [str(t.id) for t in repo.find_recent(2)] == expected


def test_taco_save_with_id_updates_same_record(container):
    repo = container.taco_repo
    saved = _taco(repo, 'Draft', 'FLTO')
    saved.name = 'Final'
    saved.ingredients = ['COTO', 'CARN']
    repo.save(saved)

    recent = repo.find_recent(10)
    assert len(recent) == 1
    assert recent[0].name == 'Final'
    assert recent[0].ingredients == ['COTO', 'CARN']


# ═══════════════════════════════════════════════════════════════════════════
# PEDIDOS
# ═══════════════════════════════════════════════════════════════════════════

def test_order_save_and_find_by_id(container):
    _user(container.user_repo, 'jdoe')
    tacos = [_taco(container.taco_repo, 'A', 'FLTO'), _taco(container.taco_repo, 'B', 'COTO')]

    saved = container.order_repo.save(placed_order('jdoe', tacos))
    assert saved.id is not None

    found = container.order_repo.find_by_id(saved.id)
    assert found.username == 'jdoe'
    assert found.delivery_city == 'Yummyville'
    assert found.cc_number == '4111111111111111'
    assert [t.name for t in found.tacos] == ['A', 'B']
    assert not found.is_open
    assert container.order_repo.find_by_id('missing') is None


def test_find_recent_by_user_returns_newest_page(container):
    _user(container.user_repo, 'jdoe')
    _user(container.user_repo, 'other')
    taco = _taco(container.taco_repo, 'A', 'FLTO')

    ids = []
    for i in range(5):
        order = container.order_repo.save(placed_order('jdoe', [taco], delivery_name=f'Order {i}'))
        ids.append(order.id)
    container.order_repo.save(placed_order('other', [taco]))

    page = container.order_repo.find_recent_by_user('jdoe', 2)
    assert [o.id for o in page] == [ids[4], ids[3]]
    assert page[0].placed_at > page[1].placed_at

    assert len(container.order_repo.find_recent_by_user('jdoe', 20)) == 5
    assert container.order_repo.find_recent_by_user('nobody', 20) == []


def test_find_recent_by_user_breaks_timestamp_ties_by_id(container):
    _user(container.user_repo, 'jdoe')
    taco = _taco(container.taco_repo, 'A', 'FLTO')
    when = next_timestamp()

    ids = []
    for _ in range(2):
        order = placed_order('jdoe', [taco])
        order.placed_at = when
        ids.append(str(container.order_repo.save(order).id))

    page = container.order_repo.find_recent_by_user('jdoe', 2)
    assert [str(o.id) for o in page] == sorted(ids, reverse=True)


# ═══════════════════════════════════════════════════════════════════════════
# USUARIOS
# ═══════════════════════════════════════════════════════════════════════════

def test_user_save_and_lookup(container):
    repo = container.user_repo
    saved = _user(repo, 'jdoe')
    assert saved.id is not None

    assert repo.find_by_username('jdoe').fullname == 'Jdoe'
    assert repo.find_by_id(saved.id).username == 'jdoe'
    assert repo.find_by_username('ghost') is None
    assert repo.find_by_id('ghost') is None


def test_user_save_with_id_updates_profile(container):
    repo = container.user_repo
    saved = _user(repo, 'jdoe')
    saved.city = 'Denver'
    repo.save(saved)
    assert repo.find_by_username('jdoe').city == 'Denver'
    assert repo.find_by_id(saved.id).city == 'Denver'


# ═══════════════════════════════════════════════════════════════════════════
# IDENTIFICADORES POR BACKEND
# ═══════════════════════════════════════════════════════════════════════════

def test_id_format_depends_on_backend(container):
    taco = _taco(container.taco_repo, 'A', 'FLTO')
    if container.backend == 'relational':
        assert isinstance(taco.id, int)
    elif container.backend == 'document':
        assert re.fullmatch(r'[0-9a-f]{24}', taco.id)
    else:
        assert uuid.UUID(taco.id).version == 1


def test_find_by_id_with_oversized_numeric_id_returns_none(container):
    huge = '9' * 25
    _user(container.user_repo, 'jdoe')
    _taco(container.taco_repo, 'A', 'FLTO')

    assert container.taco_repo.find_by_id(huge) is None
    assert container.order_repo.find_by_id(huge) is None
    assert container.user_repo.find_by_id(huge) is None
    assert container.taco_repo.find_by_id('-' + huge) is None


def test_corrupt_json_file_raises_storage_error(container):
    if container.backend == 'relational':
        pytest.skip('solo backends JSON')
    _taco(container.taco_repo, 'A', 'FLTO')

    table = 'tacos_by_day.json' if container.backend == 'wide_column' else 'tacos.json'
    with open(os.path.join(container.backend_path, table), 'w', encoding='utf-8') as f:
        f.write('{not json')

    with pytest.raises(StorageError):
        container.taco_repo.find_recent(5)
