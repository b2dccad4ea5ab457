# tests/conftest.py
import os

# Must be set before retailpulse is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ALERT_JOBS_ENABLED"] = "false"
os.environ["TWILIO_ACCOUNT_SID"] = ""

from datetime import date, datetime, timedelta, timezone  # noqa: E402
from typing import Optional  # noqa: E402

import bcrypt  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from retailpulse import models  # noqa: E402,F401
from retailpulse.core.enums import PaymentMethod, UserRole  # noqa: E402
from retailpulse.database import Base  # noqa: E402
from retailpulse.dependencies import get_db  # noqa: E402
from retailpulse.main import app  # noqa: E402
from retailpulse.models.expense import Expense  # noqa: E402
from retailpulse.models.product import Product  # noqa: E402
from retailpulse.models.refund import Refund  # noqa: E402
from retailpulse.models.transaction import Transaction, TransactionItem  # noqa: E402
from retailpulse.models.user import User  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
OWNER_EMAIL = "owner@test.local"
OWNER_PASSWORD = "secret123"


def fast_hash(password: str) -> str:
    """bcrypt with the minimum cost so auth doesn't dominate test time"""
    return bcrypt.hashpw(password.encode("utf8"), bcrypt.gensalt(rounds=4)).decode("utf8")


@pytest.fixture(scope="function")
async def test_engine():
    """In-memory SQLite database, created fresh for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Provide a database session for tests"""
    async_session_local = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session_local() as session:
        yield session


@pytest.fixture
def make_product(db_session):
    """Factory inserting a product and returning it"""
    counter = {"n": 0}

    async def _make(
        name: str = "Item",
        stock: int = 20,
        cost_price: float = 10.0,
        selling_price: float = 15.0,
        category: str = "Grocery",
        is_active: bool = True,
        expiry_date: Optional[date] = None,
        sku: Optional[str] = None,
    ) -> Product:
        counter["n"] += 1
        product = Product(
            name=name,
            sku=sku or f"SKU-{counter['n']:04d}",
            category=category,
            cost_price=cost_price,
            selling_price=selling_price,
            stock=stock,
            is_active=is_active,
            expiry_date=expiry_date,
        )
        db_session.add(product)
        await db_session.commit()
        await db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_user(db_session):
    async def _make(email: str, password: str = "password1", role: UserRole = UserRole.CASHIER,
                    is_active: bool = True, name: str = "Staff") -> User:
        user = User(name=name, email=email, password_hash=fast_hash(password), role=role, is_active=is_active)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
async def owner(make_user):
    return await make_user(OWNER_EMAIL, OWNER_PASSWORD, role=UserRole.OWNER, name="Owner")


@pytest.fixture
async def client(db_session, owner):
    """httpx client against the app, signed in as the owner, sharing the test session"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
        auth=(OWNER_EMAIL, OWNER_PASSWORD),
    ) as c:
        yield c
    app.dependency_overrides.clear()


SALES_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sales_now():
    return SALES_NOW


@pytest.fixture
async def sales_history(db_session, make_product):
    """
    A small month of trading, relative to SALES_NOW:

    - today:   3 x Rice, cash, 300
    - Mar 3:   5 x Milk, upi, 200, fully refunded
    - Mar 10:  4 x Rice, card, 400
    - Mar 14:  5 x Rice, cash, 500, payment pending
    - Feb 20: 25 x Milk, cash, 1000
    - expenses: Rent 100 on Mar 5, Power 50 on Feb 28
    """
    rice = await make_product("Rice", stock=8, cost_price=50.0, selling_price=100.0, category="Grocery")
    milk = await make_product("Milk", stock=0, cost_price=20.0, selling_price=40.0, category="Dairy")
    await make_product("Soap", stock=50, cost_price=10.0, selling_price=20.0, category="Personal Care")

    def sale(invoice, when, product, quantity, method, status="completed"):
        subtotal = product.selling_price * quantity
        return Transaction(
            invoice_number=invoice,
            subtotal=subtotal,
            total_amount=subtotal,
            payment_method=method,
            payment_status=status,
            created_at=when,
            items=[TransactionItem(
                position=0,
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.selling_price,
                subtotal=subtotal,
                total_with_gst=subtotal,
            )],
        )

    refunded = sale("INV-2", datetime(2026, 3, 3, 10, 0, tzinfo=timezone.utc), milk, 5, PaymentMethod.UPI)
    db_session.add_all([
        sale("INV-1", SALES_NOW - timedelta(hours=2), rice, 3, PaymentMethod.CASH),
        refunded,
        sale("INV-3", datetime(2026, 3, 10, 10, 0, tzinfo=timezone.utc), rice, 4, PaymentMethod.CARD),
        sale("INV-4", datetime(2026, 3, 14, 10, 0, tzinfo=timezone.utc), rice, 5, PaymentMethod.CASH, status="pending"),
        sale("INV-5", datetime(2026, 2, 20, 10, 0, tzinfo=timezone.utc), milk, 25, PaymentMethod.CASH),
        Expense(category="Rent", amount=100.0, expense_date=date(2026, 3, 5), payment_method="cash"),
        Expense(category="Power", amount=50.0, expense_date=date(2026, 2, 28), payment_method="upi"),
    ])
    await db_session.flush()

    refund = Refund(transaction_id=refunded.id, refund_amount=200.0, refund_reason="Spoiled", points_reversed=0)
    db_session.add(refund)
    await db_session.flush()
    refunded.is_refunded = True
    refunded.refund_id = refund.id
    await db_session.commit()
    return rice, milk
