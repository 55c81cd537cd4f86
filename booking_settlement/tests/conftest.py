"""
Centralized Test Configuration.
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from booking_settlement.app.main import app
from booking_settlement.app.db.session import get_db, Base
from booking_settlement.app.core.clock import utcnow
from booking_settlement.app.domain.ledger.ledger import Ledger
from booking_settlement.app.domain.settlement.orchestrator import SettlementOrchestrator
from booking_settlement.app.models.booking import Booking
from booking_settlement.app.models.commission_model import CommissionModel
from booking_settlement.app.models.refund_policy import RefundPolicy, RefundPolicyRule
from booking_settlement.app.models.settlement_enums import (
    BookingStatus, CommissionCalculationType, RefundPolicyType
)

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

CUSTOMER_ID = "customer-1"
CREATOR_ID = "creator-1"
ADMIN_HEADERS = {"X-Actor-Name": "finance-admin"}

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Fresh database per test
@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield test_engine
    
    await test_engine.dispose()

@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session

@pytest.fixture
async def client(session_factory):
    """Async client for testing, bound to the per-test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}


# --- Reference data ---

@pytest.fixture
async def chart(db_session):
    """Default chart of accounts."""
    await Ledger(db_session).seed_chart_of_accounts()
    await db_session.commit()

@pytest.fixture
async def standard_model(db_session, chart):
    """Percentage model: 5% charter, 2% creator, 1% web service."""
    model = CommissionModel(
        id="CM-1",
        name={"en": "Standard Charter"},
        calculation_type=CommissionCalculationType.PERCENTAGE,
        charter_commission=Decimal("5"),
        creator_commission=Decimal("2"),
        web_service_commission=Decimal("1"),
    )
    db_session.add(model)
    await db_session.commit()
    return model

@pytest.fixture
async def international_policy(db_session):
    """10% from 72h out, 50% inside 24h, 100% at departure."""
    policy = RefundPolicy(
        id="RP-1",
        name={"en": "Standard International Refund Policy"},
        policy_type=RefundPolicyType.INTERNATIONAL,
    )
    db_session.add(policy)
    await db_session.flush()
    for hours, percentage in ((72, "10"), (24, "50"), (0, "100")):
        db_session.add(RefundPolicyRule(
            policy_id=policy.id, hours_before_departure=hours, penalty_percentage=Decimal(percentage)
        ))
    await db_session.commit()
    return policy

@pytest.fixture
def make_booking(db_session, standard_model):
    """Factory for committed bookings; defaults to 2 adults at 2,500,000 + 150,000 taxes."""
    async def _make(booking_id: str = "BK-1", **overrides) -> Booking:
        values = {
            "id": booking_id,
            "user_id": CUSTOMER_ID,
            "flight_number": "IR-452",
            "creator_id": CREATOR_ID,
            "commission_model_id": standard_model.id,
            "price": 2_500_000,
            "taxes": 150_000,
            "currency_code": "IRR",
            "adults": 2,
            "children": 0,
            "infants": 0,
            "status": BookingStatus.CONFIRMED,
            "departure_at": utcnow() + timedelta(days=10),
        }
        values.update(overrides)
        booking = Booking(**values)
        db_session.add(booking)
        await db_session.commit()
        return booking
    return _make

@pytest.fixture
def fund_wallet(db_session):
    """Top up a wallet through an audited manual charge."""
    async def _fund(user_id: str, amount: int, currency_code: str = "IRR"):
        return await SettlementOrchestrator(db_session).manual_adjustment(
            user_id, currency_code, amount, actor="test-admin", description="Top up"
        )
    return _fund
