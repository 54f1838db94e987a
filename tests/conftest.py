import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-signing")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest
from datetime import datetime, timedelta, UTC
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.config import settings
from app.dependencies import get_payment_gateway, get_order_notifier
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models import (
    Base,
    Tenant,
    AdminUser,
    MenuCategory,
    MenuItem,
    ModifierGroup,
    ModifierOption,
)
from app.models.modifier_group import ModifierType
from app.models.role import Role
from app.models.tenant import SubscriptionStatus, SubscriptionTier
from app.services.payment_gateway import PaymentGateway
from app.services.order_notifier import OrderNotifier
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeGateway(PaymentGateway):
    """Records Stripe calls instead of making them"""

    def __init__(self, existing_customers: dict[str, str] | None = None):
        self.customers = dict(existing_customers or {})
        self.calls: list[tuple] = []

    def find_customer_id_by_email(self, email):
        self.calls.append(("find_customer", email))
        return self.customers.get(email)

    def create_customer(self, email, name, metadata):
        self.calls.append(("create_customer", email, metadata))
        customer_id = f"cus_{len(self.customers) + 1}"
        self.customers[email] = customer_id
        return customer_id

    def update_customer_metadata(self, customer_id, metadata):
        self.calls.append(("update_customer", customer_id, metadata))

    def create_checkout_session(
        self, customer_id, price_data, trial_period_days, success_url, cancel_url, metadata
    ):
        self.calls.append(("checkout", customer_id, price_data, trial_period_days, metadata))
        return {"id": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}


class RecordingNotifier(OrderNotifier):
    """Keeps sent order messages in memory"""

    def __init__(self):
        self.messages: list[str] = []

    def send(self, message):
        self.messages.append(message)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(db_session, fake_gateway, notifier):
    """FastAPI test client with test database and fake external services"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway
    app.dependency_overrides[get_order_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(
    user_id: str = "test-user-123", expired: bool = False, email: str | None = None
) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token
        email: Optional 'email' claim

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}
    if email:
        payload["email"] = email

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def auth_headers_for(user_id: str, email: str | None = None) -> dict:
    return {"Authorization": f"Bearer {create_test_token(user_id=user_id, email=email)}"}


def make_tenant(db_session, subdomain: str, **fields) -> Tenant:
    values = {
        "restaurant_name": subdomain.title(),
        "subdomain": subdomain,
        "is_active": True,
        "subscription_status": SubscriptionStatus.ACTIVE,
        "subscription_tier": SubscriptionTier.BASIC,
    }
    values.update(fields)
    tenant = Tenant(**values)
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


def make_admin(db_session, admin_id: str, tenant: Tenant | None, role: Role = Role.ADMIN, **fields) -> AdminUser:
    admin_user = AdminUser(
        id=admin_id,
        email=fields.pop("email", f"{admin_id}@example.com"),
        role=role,
        tenant_id=tenant.id if tenant else None,
        **fields,
    )
    db_session.add(admin_user)
    db_session.commit()
    db_session.refresh(admin_user)
    return admin_user


@pytest.fixture
def tenant_a(db_session):
    return make_tenant(db_session, "elysium", restaurant_name="Elysium Cafe")


@pytest.fixture
def tenant_b(db_session):
    return make_tenant(db_session, "bistro", restaurant_name="Bistro Norte")


@pytest.fixture
def admin_a(db_session, tenant_a):
    return make_admin(db_session, "admin-a", tenant_a)


@pytest.fixture
def admin_b(db_session, tenant_b):
    return make_admin(db_session, "admin-b", tenant_b)


@pytest.fixture
def super_admin(db_session):
    return make_admin(db_session, "root", None, is_super_admin=True)


@pytest.fixture
def admin_a_headers(admin_a):
    return auth_headers_for(admin_a.id)


@pytest.fixture
def admin_b_headers(admin_b):
    return auth_headers_for(admin_b.id)


@pytest.fixture
def super_admin_headers(super_admin):
    return auth_headers_for(super_admin.id)


@pytest.fixture
def coffee_menu(db_session, tenant_a):
    """
    Tenant A menu: a Beverages category with a latte (medium/large
    variants, milk modifier group) and an unavailable croissant.
    """
    category = MenuCategory(tenant_id=tenant_a.id, name="Beverages", icon="Coffee", position=0)
    db_session.add(category)
    db_session.flush()

    milk = ModifierGroup(
        tenant_id=tenant_a.id,
        name="Milk",
        type=ModifierType.SINGLE,
        required=True,
        min_selections=1,
        max_selections=1,
    )
    milk.options = [
        ModifierOption(tenant_id=tenant_a.id, label="Whole", price_modifier=Decimal("0"), position=0),
        ModifierOption(tenant_id=tenant_a.id, label="Oat", price_modifier=Decimal("10.00"), position=1),
    ]
    extras = ModifierGroup(
        tenant_id=tenant_a.id,
        name="Extras",
        type=ModifierType.MULTIPLE,
        required=False,
        min_selections=0,
        max_selections=3,
        position=1,
    )
    extras.options = [
        ModifierOption(tenant_id=tenant_a.id, label="Extra shot", price_modifier=Decimal("12.00"), position=0),
        ModifierOption(tenant_id=tenant_a.id, label="Vanilla", price_modifier=Decimal("8.00"), position=1),
    ]

    latte = MenuItem(
        tenant_id=tenant_a.id,
        category_id=category.id,
        name="Latte",
        price=Decimal("55.00"),
        tags=["hot"],
        variants=[{"name": "medium", "price": 55.0}, {"name": "large", "price": 65.0}],
        position=0,
    )
    latte.modifier_groups = [milk, extras]
    croissant = MenuItem(
        tenant_id=tenant_a.id,
        category_id=category.id,
        name="Croissant",
        price=Decimal("40.00"),
        position=1,
        is_available=False,
    )
    db_session.add_all([milk, extras, latte, croissant])
    db_session.commit()
    return {
        "category": category,
        "latte": latte,
        "croissant": croissant,
        "milk": milk,
        "extras": extras,
    }
