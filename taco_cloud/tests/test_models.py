from datetime import datetime, timezone

from taco_cloud.models import (
    Ingredient, IngredientType, Order, OrderStatus, Taco,
    luhn_valid, next_timestamp, parse_timestamp, validate_delivery,
)

from conftest import VALID_DELIVERY


def test_next_timestamp_is_strictly_increasing():
    stamps = [next_timestamp() for _ in range(200)]
    assert all(a < b for a, b in zip(stamps, stamps[1:]))
    assert all(s.tzinfo is not None for s in stamps)


def test_parse_timestamp_accepts_naive_and_iso():
    naive = datetime(2024, 1, 2, 3, 4, 5)
    assert parse_timestamp(naive) == naive.replace(tzinfo=timezone.utc)
    assert parse_timestamp('2024-01-02T03:04:05Z') == naive.replace(tzinfo=timezone.utc)
    assert parse_timestamp(None) is None
    assert parse_timestamp('') is None


def test_luhn():
    assert luhn_valid('4111111111111111')
    assert luhn_valid('4111 1111 1111 1111')
    assert not luhn_valid('4111111111111112')
    assert not luhn_valid('abcd')
    assert not luhn_valid('')


def test_validate_delivery_accepts_valid_fields():
    assert validate_delivery(VALID_DELIVERY) == {}


def test_validate_delivery_reports_every_field():
    errors = validate_delivery({
        'delivery_name': ' ',
        'cc_number': '1234',
        'cc_expiration': '13/30',
        'cc_cvv': '12',
    })
    assert errors == {
        'delivery_name': 'Name is required',
        'delivery_street': 'Street is required',
        'delivery_city': 'City is required',
        'delivery_state': 'State is required',
        'delivery_zip': 'Zip code is required',
        'cc_number': 'Not a valid credit card number',
        'cc_expiration': 'Must be formatted MM/YY',
        'cc_cvv': 'Invalid CVV',
    }


def test_order_add_design_keeps_call_order_without_dedup():
    order = Order()
    a = Taco(name='A', ingredients=['FLTO'])
    b = Taco(name='B', ingredients=['COTO'])
    for taco in (a, b, a):
        order.add_design(taco)
    assert [t.name for t in order.tacos] == ['A', 'B', 'A']
    assert order.is_open


def test_order_from_dict_restores_tacos_and_status():
    when = next_timestamp()
    order = Order(
        tacos=[Taco(name='A', ingredients=['FLTO', 'GRBF'], id='t1', created_at=when)],
        id='o1',
        username='jdoe',
        placed_at=when,
        status=OrderStatus.PLACED,
        **VALID_DELIVERY
    )
    restored = Order.from_dict(order.to_dict())
    assert restored == order
    assert not restored.is_open


def test_ingredient_from_dict_uses_enum():
    ingredient = Ingredient.from_dict({'id': 'FLTO', 'name': 'Flour Tortilla', 'type': 'WRAP'})
    assert ingredient.type is IngredientType.WRAP
