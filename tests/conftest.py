"""Shared test fixtures."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DB_URL", "sqlite://")

from dataclasses import dataclass, field
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lensmatch.core.errors import PaymentAuthorizationFailed
from lensmatch.core.security import create_access_token, hash_password
from lensmatch.database import Base, get_db
from lensmatch.deps import get_payment_gateway
from lensmatch.main import app
from lensmatch.models.booking import Booking, BookingStatus
from lensmatch.models.photographer import Category, Photographer
from lensmatch.models.slot import AvailabilitySlot
from lensmatch.models.user import Role, User
from lensmatch.services.payments import ChargeAuthorization


@dataclass
class FakeGateway:
    """In-memory charge gateway for tests."""

    fail: bool = False
    authorized: list[tuple[int, dict]] = field(default_factory=list)
    cancelled: list[str] = field(default_factory=list)

    def authorize(self, amount: int, metadata: dict[str, str]) -> ChargeAuthorization:
        if self.fail:
            raise PaymentAuthorizationFailed("Card declined")
        self.authorized.append((amount, metadata))
        n = len(self.authorized)
        return ChargeAuthorization(id=f"pi_{n}", client_secret=f"pi_{n}_secret")

    def retrieve(self, authorization_id: str) -> ChargeAuthorization:
        return ChargeAuthorization(id=authorization_id, client_secret=f"{authorization_id}_secret")

    def cancel(self, authorization_id: str) -> None:
        self.cancelled.append(authorization_id)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def client(db, gateway):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: Role = Role.CUSTOMER, email: str | None = None, first_name: str = "Test") -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password_hash=hash_password("password123"),
            first_name=first_name,
            last_name=str(counter["n"]),
            role=role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_photographer(db, make_user):
    def _make(base_rate: int = 150000, city: str = "Mumbai", categories: list[Category] | None = None) -> Photographer:
        user = make_user(Role.PHOTOGRAPHER, first_name="Photo")
        p = Photographer(user=user, bio="Weddings and portraits", city=city, state="MH", base_rate=base_rate)
        p.categories = categories or []
        db.add(p)
        db.commit()
        db.refresh(p)
        return p

    return _make


@pytest.fixture
def make_slot(db):
    def _make(photographer: Photographer, day: date = date(2024, 6, 1), start: str = "10:00", end: str = "11:00", booked: bool = False) -> AvailabilitySlot:
        slot = AvailabilitySlot(photographer_id=photographer.id, date=day, start_time=start, end_time=end, is_booked=booked)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make


@pytest.fixture
def make_booking(db):
    def _make(customer: User, photographer: Photographer, status: BookingStatus = BookingStatus.PENDING, day: date = date(2024, 6, 1), start: str = "10:00", end: str = "11:00") -> Booking:
        b = Booking(
            customer_id=customer.id,
            photographer_id=photographer.id,
            date=day,
            start_time=start,
            end_time=end,
            total_amount=150000,
            currency="usd",
            status=status,
        )
        db.add(b)
        db.commit()
        db.refresh(b)
        return b

    return _make


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(sub=user.email)}"}


@pytest.fixture
def headers():
    return auth_headers
