import itertools

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone

from rest_framework.test import APIClient

from modules.accounts.constants import UserRole
from modules.accounts.models import Profile
from modules.accounts.services import WorkspaceService, resolve_actor
from modules.catalog.models import CatalogProduct, ProductCategory
from modules.catalog.repositories.django_repository import CatalogProductDjangoRepository
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

User = get_user_model()

# 1x1 transparent PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
PNG_DATA_URI = f"data:image/png;base64,{PNG_BASE64}"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Workspace state and throttle counters live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users, profiles and actors
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_user():
    def _make(role, username=None, fullname=""):
        user = User.objects.create_user(
            username=username or role.lower(), password="testpass123"
        )
        Profile.objects.create(user=user, role=role, fullname=fullname)
        return user

    return _make


@pytest.fixture()
def superadmin_user(make_user):
    return make_user(UserRole.SUPERADMIN, username="owner", fullname="Owner Erfolgs")


@pytest.fixture()
def admin_user(make_user):
    return make_user(UserRole.ADMIN_MARKETPLACE, username="admin", fullname="Admin Toko")


@pytest.fixture()
def setting_user(make_user):
    return make_user(UserRole.SETTING, fullname="Budi Setting")


@pytest.fixture()
def print_user(make_user):
    return make_user(UserRole.PRINT, fullname="Sari Print")


@pytest.fixture()
def press_user(make_user):
    return make_user(UserRole.PRESS, fullname="Andi Press")


@pytest.fixture()
def jahit_user(make_user):
    return make_user(UserRole.JAHIT, fullname="Wati Jahit")


@pytest.fixture()
def packing_user(make_user):
    return make_user(UserRole.PACKING, fullname="Rudi Packing")


@pytest.fixture()
def superadmin(superadmin_user):
    return resolve_actor(superadmin_user)


@pytest.fixture()
def admin(admin_user):
    return resolve_actor(admin_user)


@pytest.fixture()
def setting(setting_user):
    return resolve_actor(setting_user)


@pytest.fixture()
def printer(print_user):
    return resolve_actor(print_user)


@pytest.fixture()
def press(press_user):
    return resolve_actor(press_user)


@pytest.fixture()
def jahit(jahit_user):
    return resolve_actor(jahit_user)


@pytest.fixture()
def packing(packing_user):
    return resolve_actor(packing_user)


@pytest.fixture()
def client_for():
    """APIClient force-authenticated as the given user."""

    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


# ---------------------------------------------------------------------------
# Catalog and orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def catalog_product():
    return CatalogProduct.objects.create(
        name="Jersey Home 2024",
        category=ProductCategory.JERSEY,
        image=PNG_DATA_URI,
        description="Home kit, dryfit",
    )


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_repository=CatalogProductDjangoRepository(),
        workspace=WorkspaceService(),
    )


@pytest.fixture()
def make_order():
    """Insert an order row directly, bypassing the lifecycle."""
    counter = itertools.count(1)

    def _make(**fields):
        data = {
            "order_id": f"SHP-{next(counter):04d}",
            "product_name": "Jersey Custom",
            "marketplace": "Shopee Erfo.id",
            "order_date": timezone.localdate(),
        }
        data.update(fields)
        return Order.objects.create(**data)

    return _make
