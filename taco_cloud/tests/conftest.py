import re

import pytest

from taco_cloud import performance_logger
from taco_cloud.app_container import AppContainer, BACKENDS
from taco_cloud.models import Order, OrderStatus, next_timestamp

CSRF_RE = re.compile(r'name="csrf_token" value="([0-9a-f]+)"')

VALID_DELIVERY = {
    'delivery_name': 'Jane Doe',
    'delivery_street': '1234 Culinary Blvd.',
    'delivery_city': 'Yummyville',
    'delivery_state': 'CO',
    'delivery_zip': '81019',
    'cc_number': '4111111111111111',
    'cc_expiration': '12/30',
    'cc_cvv': '123',
}


@pytest.fixture(autouse=True)
def logs_dir(tmp_path):
    # Los logs de profiling de cada test van a su carpeta temporal
    path = tmp_path / 'logs'
    performance_logger.configure(logs_dir=str(path), enabled=True)
    performance_logger.reset_stats()
    yield path
    performance_logger.reset_stats()


@pytest.fixture(params=BACKENDS)
def container(request, tmp_path):
    AppContainer.reset_instance()
    c = AppContainer(data_dir=str(tmp_path / 'data'), backend=request.param)
    yield c
    AppContainer.reset_instance()


def placed_order(username, tacos, **overrides):
    """Pedido ya colocado listo para guardar directamente en un repositorio."""
    fields = dict(VALID_DELIVERY)
    fields.update(overrides)
    return Order(
        tacos=list(tacos),
        username=username,
        placed_at=next_timestamp(),
        status=OrderStatus.PLACED,
        **fields
    )


def csrf_from(html):
    m = CSRF_RE.search(html)
    return m.group(1) if m else None
