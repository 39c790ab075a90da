import os

# Must be set before hotelbook.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MAILGUN_API_KEY"] = ""
os.environ["CLOUDINARY_URL"] = ""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hotelbook.db import Base, get_db, init_db
from hotelbook.main import app
from hotelbook.models import Booking, BookingStatus, Hotel, PaymentStatus, Room, RoomType, User, UserRole
from hotelbook.schemas import BookingCreateIn, GuestInfoIn
from hotelbook.security import hash_password
from hotelbook.services.booking import BookingService, compute_pricing, generate_reference

PASSWORD = "password123"
FIXED_TODAY = date(2024, 6, 1)

_seq = count(1)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session):
    def _make_user(role: str = UserRole.GUEST.value, email: str | None = None) -> User:
        n = next(_seq)
        user = User(
            email=email or f"user{n}@example.com",
            hashed_password=hash_password(PASSWORD),
            first_name="Test",
            last_name=f"User{n}",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def guest(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN.value)


@pytest.fixture
def make_hotel(db_session):
    def _make_hotel(**overrides) -> Hotel:
        n = next(_seq)
        data = dict(
            name=f"Hotel {n}",
            description="Seaside hotel",
            street="1 Beach Road",
            city="Lisbon",
            state="Lisboa",
            country="Portugal",
            zip_code="1000-001",
            phone="+351 000 000",
            email=f"hotel{n}@example.com",
            star_rating=4,
        )
        data.update(overrides)
        hotel = Hotel(**data)
        db_session.add(hotel)
        db_session.commit()
        db_session.refresh(hotel)
        return hotel

    return _make_hotel


@pytest.fixture
def hotel(make_hotel):
    return make_hotel()


@pytest.fixture
def make_room(db_session):
    def _make_room(hotel: Hotel, room_number: str = "101", **overrides) -> Room:
        data = dict(
            hotel_id=hotel.id,
            room_number=room_number,
            type=RoomType.DELUXE,
            name=f"Deluxe {room_number}",
            description="Sea view",
            price=Decimal("100.00"),
            discount_price=Decimal("80.00"),
            capacity_adults=2,
            capacity_children=1,
        )
        data.update(overrides)
        room = Room(**data)
        db_session.add(room)
        hotel.total_rooms = (hotel.total_rooms or 0) + 1
        db_session.commit()
        db_session.refresh(room)
        return room

    return _make_room


@pytest.fixture
def room(hotel, make_room):
    return make_room(hotel)


@pytest.fixture
def make_booking(db_session):
    """Insert a booking row directly, bypassing the creation checks."""

    def _make_booking(room: Room, check_in: date, check_out: date, user: User | None = None,
                      status: BookingStatus = BookingStatus.CONFIRMED) -> Booking:
        if user is None:
            user = db_session.query(User).first()
        pricing = compute_pricing(room, check_in, check_out, Decimal("0.12"))
        booking = Booking(
            booking_reference=generate_reference(),
            user_id=user.id,
            hotel_id=room.hotel_id,
            room_id=room.id,
            check_in=check_in,
            check_out=check_out,
            adults=1,
            children=0,
            nights=pricing.nights,
            price_per_night=pricing.price_per_night,
            subtotal=pricing.subtotal,
            taxes=pricing.taxes,
            total_amount=pricing.total_amount,
            status=status,
            payment_status=PaymentStatus.PENDING,
            guest_first_name=user.first_name,
            guest_last_name=user.last_name,
            guest_email=user.email,
            guest_phone="+1 555 0100",
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def booking_payload():
    def _payload(room: Room, check_in: date, check_out: date, **overrides) -> BookingCreateIn:
        data = dict(
            room_id=room.id,
            hotel_id=room.hotel_id,
            check_in=check_in,
            check_out=check_out,
            adults=2,
            children=0,
            guest_info=GuestInfoIn(
                first_name="Ada",
                last_name="Lovelace",
                email="Ada@Example.com",
                phone="+44 20 0000",
            ),
        )
        data.update(overrides)
        return BookingCreateIn(**data)

    return _payload


@pytest.fixture
def today():
    return FIXED_TODAY


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def booking_service(db_session, notifications, today):
    return BookingService(
        db_session,
        notify=lambda *args: notifications.append(args),
        today=lambda: today,
        tax_rate=Decimal("0.12"),
    )


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    def _login(user: User, password: str = PASSWORD):
        resp = client.post("/api/v1/auth/login", json={"email": user.email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp

    return _login
