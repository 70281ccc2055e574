import pytest

from taco_cloud import performance_logger
from taco_cloud.errors import OrderStateError, StorageError, ValidationError
from taco_cloud.models import IngredientType, OrderStatus
from taco_cloud.services import recent_tacos_resource

from conftest import VALID_DELIVERY


def _register(container, username='jdoe', password='secret', **profile):
    form = {'username': username, 'password': password, 'confirm': password}
    form.update(profile)
    return container.user_service.register(form)


# ═══════════════════════════════════════════════════════════════════════════
# CATÁLOGO
# ═══════════════════════════════════════════════════════════════════════════

def test_catalog_is_seeded_once(container):
    catalog = container.catalog_service
    assert len(catalog.list_all()) == 10
    assert catalog.seed_defaults() == 0
    assert catalog.find_by_id('FLTO').name == 'Flour Tortilla'
    assert catalog.find_by_id('XXXX') is None


def test_group_by_type_has_every_type(container):
    groups = container.catalog_service.group_by_type(container.catalog_service.list_all())
    assert set(groups) == set(IngredientType)
    assert sorted(i.id for i in groups[IngredientType.WRAP]) == ['COTO', 'FLTO']
    assert container.catalog_service.group_by_type([]) == {t: [] for t in IngredientType}


# ═══════════════════════════════════════════════════════════════════════════
# DISEÑO
# ═══════════════════════════════════════════════════════════════════════════

def test_create_taco(container):
    taco = container.design_service.create('Beef Taco', ['FLTO', 'GRBF'])
    assert taco.id is not None
    assert taco.name == 'Beef Taco'
    assert taco.ingredients == ['FLTO', 'GRBF']
    assert taco.created_at is not None
    assert container.taco_repo.find_by_id(taco.id).ingredients == ['FLTO', 'GRBF']


def test_create_without_ingredients_persists_nothing(container):
    with pytest.raises(ValidationError) as exc:
        container.design_service.create('Bad Taco', [])
    assert exc.value.errors == {'ingredients': 'You must choose at least 1 ingredient'}
    assert container.taco_repo.find_recent(10) == []


def test_create_reports_all_errors_at_once(container):
    with pytest.raises(ValidationError) as exc:
        container.design_service.create('   ', [])
    assert set(exc.value.errors) == {'name', 'ingredients'}
    assert exc.value.errors['name'] == 'Name is required'


def test_create_rejects_duplicate_and_unknown_ingredients(container):
    with pytest.raises(ValidationError) as exc:
        container.design_service.create('Twice', ['FLTO', 'GRBF', 'FLTO'])
    assert exc.value.errors['ingredients'] == 'Duplicate ingredient: FLTO'

    with pytest.raises(ValidationError) as exc:
        container.design_service.create('Mystery', ['FLTO', 'XXXX'])
    assert exc.value.errors['ingredients'] == 'Unknown ingredient: XXXX'
    assert container.taco_repo.find_recent(10) == []


def test_create_is_audited_and_profiled(container):
    taco = container.design_service.create('Beef Taco', ['FLTO', 'GRBF'], username='jdoe')

    entry = container.audit_service.get_recent(1)[0]
    assert entry['type'] == 'TACO'
    assert entry['user'] == 'jdoe'
    assert entry['related_id'] == str(taco.id)
    assert performance_logger.get_function_stats()['Crear taco']['calls'] == 1


# ═══════════════════════════════════════════════════════════════════════════
# PEDIDOS
# ═══════════════════════════════════════════════════════════════════════════

def test_add_design_appends_in_order(container):
    service = container.order_service
    a = container.design_service.create('A', ['FLTO'])
    b = container.design_service.create('B', ['COTO'])

    order = service.new_order()
    for taco in (a, b, a):
        service.add_design(order, taco)
    assert [t.name for t in order.tacos] == ['A', 'B', 'A']


def test_checkout_without_tacos_keeps_order_open(container):
    user = _register(container)
    order = container.order_service.new_order()

    with pytest.raises(ValidationError) as exc:
        container.order_service.checkout(order, user, VALID_DELIVERY)
    assert exc.value.errors == {'tacos': 'You must design at least 1 taco'}
    assert order.is_open
    assert order.id is None
    assert container.order_service.recent_for_user('jdoe') == []


def test_checkout_invalid_payment_keeps_order_open(container):
    user = _register(container)
    order = container.order_service.new_order()
    container.order_service.add_design(order, container.design_service.create('A', ['FLTO']))

    fields = dict(VALID_DELIVERY, cc_number='4111111111111112', cc_cvv='1')
    with pytest.raises(ValidationError) as exc:
        container.order_service.checkout(order, user, fields)
    assert exc.value.errors == {
        'cc_number': 'Not a valid credit card number',
        'cc_cvv': 'Invalid CVV',
    }
    assert order.is_open
    assert order.cc_number == ''


def test_checkout_requires_user(container):
    order = container.order_service.new_order()
    container.order_service.add_design(order, container.design_service.create('A', ['FLTO']))

    with pytest.raises(ValidationError) as exc:
        container.order_service.checkout(order, None, VALID_DELIVERY)
    assert exc.value.errors == {'user': 'You must be logged in to place an order'}


def test_checkout_storage_failure_keeps_order_open(container, monkeypatch):
    user = _register(container)
    service = container.order_service
    order = service.new_order()
    service.add_design(order, container.design_service.create('A', ['FLTO']))

    def fail(_order):
        raise StorageError('disco lleno', container.backend)

    monkeypatch.setattr(container.order_repo, 'save', fail)
    with pytest.raises(StorageError):
        service.checkout(order, user, VALID_DELIVERY)

    assert order.is_open
    assert order.id is None
    assert order.placed_at is None
    assert order.cc_number == ''
    assert [t.name for t in order.tacos] == ['A']
    monkeypatch.undo()
    assert service.recent_for_user('jdoe') == []


def test_checkout_places_order(container):
    user = _register(container)
    service = container.order_service
    order = service.new_order()
    service.add_design(order, container.design_service.create('A', ['FLTO', 'GRBF']))
    service.add_design(order, container.design_service.create('B', ['COTO', 'CARN']))

    placed = service.checkout(order, user, VALID_DELIVERY)
    assert placed is order
    assert placed.status is OrderStatus.PLACED
    assert placed.id is not None
    assert placed.placed_at is not None
    assert placed.username == 'jdoe'

    history = service.recent_for_user('jdoe')
    assert history[0].id == placed.id
    assert service.find_by_id(placed.id).cc_expiration == '12/30'
    assert [t.name for t in history[0].tacos] == ['A', 'B']
    assert container.audit_service.get_recent(1)[0]['type'] == 'PEDIDO'

    with pytest.raises(OrderStateError):
        service.add_design(order, container.design_service.create('C', ['FLTO']))
    with pytest.raises(OrderStateError):
        service.checkout(order, user, VALID_DELIVERY)


def test_recent_for_user_uses_configured_page_size(container):
    user = _register(container)
    service = container.order_service
    service.page_size = 2
    taco = container.design_service.create('A', ['FLTO'])

    placed_ids = []
    for _ in range(5):
        order = service.new_order()
        service.add_design(order, taco)
        placed_ids.append(service.checkout(order, user, VALID_DELIVERY).id)

    assert [o.id for o in service.recent_for_user('jdoe')] == placed_ids[:-3:-1]
    assert len(service.recent_for_user('jdoe', page_size=10)) == 5


def test_session_round_trip_carries_only_tacos(container):
    service = container.order_service
    order = service.new_order()
    taco = container.design_service.create('A', ['FLTO', 'GRBF'])
    service.add_design(order, taco)
    order.cc_number = '4111111111111111'

    data = service.to_session(order)
    assert set(data) == {'tacos'}
    assert 'cc_number' not in str(data)

    restored = service.from_session(data)
    assert restored.is_open
    assert [t.id for t in restored.tacos] == [taco.id]
    assert restored.tacos[0].ingredients == ['FLTO', 'GRBF']
    assert service.from_session(None).tacos == []


def test_open_order_store_keeps_tacos_by_key(container):
    service = container.order_service
    store = container.open_order_repo
    order = service.new_order()
    service.add_design(order, container.design_service.create('A', ['FLTO']))

    store.store('abc', service.to_session(order))
    assert store.load('missing') is None

    restored = service.from_session(store.load('abc'))
    assert [t.name for t in restored.tacos] == ['A']
    assert restored.is_open

    store.discard('abc')
    assert store.load('abc') is None
    store.discard('abc')


# ═══════════════════════════════════════════════════════════════════════════
# USUARIOS
# ═══════════════════════════════════════════════════════════════════════════

def test_register_and_authenticate(container):
    user = _register(container, fullname='Jane Doe', city='Yummyville')
    assert user.password != 'secret'
    assert container.user_service.get_user('jdoe').city == 'Yummyville'

    assert container.user_service.authenticate('jdoe', 'secret').username == 'jdoe'
    assert container.user_service.authenticate('jdoe', 'wrong') is None
    assert container.user_service.authenticate('ghost', 'secret') is None
    assert container.audit_service.get_recent(1)[0]['type'] == 'LOGIN'


def test_register_validation(container):
    _register(container)
    with pytest.raises(ValidationError) as exc:
        _register(container)
    assert exc.value.errors == {'username': 'Username already taken'}

    with pytest.raises(ValidationError) as exc:
        container.user_service.register({'username': 'new', 'password': 'secret', 'confirm': 'other'})
    assert exc.value.errors == {'confirm': 'Passwords do not match'}

    with pytest.raises(ValidationError) as exc:
        container.user_service.register({})
    assert set(exc.value.errors) == {'username', 'password'}


# ═══════════════════════════════════════════════════════════════════════════
# TACOS RECIENTES
# ═══════════════════════════════════════════════════════════════════════════

def test_recent_tacos_empty(container):
    assert container.recent_tacos_service.recent_tacos() == []


def test_recent_tacos_resolve_ingredients(container):
    container.design_service.create('First', ['FLTO'])
    second = container.design_service.create('Second', ['COTO', 'CARN'])

    summaries = container.recent_tacos_service.recent_tacos()
    assert [s.name for s in summaries] == ['Second', 'First']
    assert summaries[0].id == second.id
    assert [(i.name, i.type) for i in summaries[0].ingredients] == [
        ('Corn Tortilla', 'WRAP'), ('Carnitas', 'PROTEIN'),
    ]
    assert len(container.recent_tacos_service.recent_tacos(limit=1)) == 1


def test_find_summary(container):
    taco = container.design_service.create('Beef Taco', ['FLTO', 'GRBF'])
    summary = container.recent_tacos_service.find_summary(taco.id)
    assert summary.name == 'Beef Taco'
    assert container.recent_tacos_service.find_summary('missing') is None


def test_recent_tacos_resource_links(container):
    taco = container.design_service.create('Beef Taco', ['FLTO'])
    summaries = container.recent_tacos_service.recent_tacos()

    resource = recent_tacos_resource(
        summaries, lambda taco_id: f'/tacos/{taco_id}', '/tacos/recent'
    )
    tacos = resource['_embedded']['tacos']
    assert resource['_links'] == {'recents': {'href': '/tacos/recent'}}
    assert tacos[0]['name'] == 'Beef Taco'
    assert tacos[0]['ingredients'] == [{'name': 'Flour Tortilla', 'type': 'WRAP'}]
    assert tacos[0]['_links'] == {'self': {'href': f'/tacos/{taco.id}'}}
