import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from hotelbook.db import init_db
from hotelbook.errors import BookingConflictError
from hotelbook.models import ACTIVE_STATUSES, Booking, Hotel, Room, RoomType, User
from hotelbook.schemas import BookingCreateIn, GuestInfoIn
from hotelbook.services.booking import BookingService

WORKERS = 8
TODAY = date(2024, 6, 1)


@pytest.fixture
def file_engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    # SQLite has no row locks; take the database write lock when each
    # transaction begins so competing writers queue instead of deadlocking.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded(file_engine):
    Session = sessionmaker(bind=file_engine, autoflush=False)
    with Session() as db:
        hotel = Hotel(
            name="Race Hotel", description="", street="1 Main St", city="Porto", state="Porto",
            country="Portugal", zip_code="4000", phone="000", email="race@example.com", star_rating=3,
        )
        db.add(hotel)
        db.flush()
        room = Room(
            hotel_id=hotel.id, room_number="1", type=RoomType.STANDARD, name="Single",
            price=Decimal("50.00"), capacity_adults=2, capacity_children=0,
        )
        users = [
            User(email=f"racer{i}@example.com", hashed_password="x", first_name="Racer", last_name=str(i))
            for i in range(WORKERS)
        ]
        db.add(room)
        db.add_all(users)
        db.commit()
        return Session, hotel.id, room.id, [u.id for u in users]


def _attempt(Session, barrier, user_id, hotel_id, room_id, check_in, check_out):
    payload = BookingCreateIn(
        room_id=room_id,
        hotel_id=hotel_id,
        check_in=check_in,
        check_out=check_out,
        adults=1,
        guest_info=GuestInfoIn(first_name="Racer", last_name=str(user_id), email=f"racer{user_id}@example.com", phone="000"),
    )
    db = Session()
    try:
        service = BookingService(db, notify=lambda *args: None, today=lambda: TODAY)
        barrier.wait()
        try:
            return service.create_booking(user_id, payload).id
        except BookingConflictError as e:
            return e
    finally:
        db.close()


def test_concurrent_overlapping_requests_admit_at_most_one(seeded):
    Session, hotel_id, room_id, user_ids = seeded
    barrier = threading.Barrier(WORKERS)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [
            # Every request overlaps every other on 2024-06-12
            pool.submit(_attempt, Session, barrier, uid, hotel_id, room_id, date(2024, 6, 10 + i % 3), date(2024, 6, 13 + i % 2))
            for i, uid in enumerate(user_ids)
        ]
        results = [f.result(timeout=60) for f in futures]

    winners = [r for r in results if isinstance(r, int)]
    losers = [r for r in results if isinstance(r, BookingConflictError)]
    assert len(winners) <= 1
    assert len(winners) + len(losers) == WORKERS

    with Session() as db:
        active = db.query(Booking).filter(Booking.room_id == room_id, Booking.status.in_(ACTIVE_STATUSES)).all()
        assert [b.id for b in active] == winners


def test_concurrent_disjoint_requests_all_succeed(seeded):
    Session, hotel_id, room_id, user_ids = seeded
    barrier = threading.Barrier(WORKERS)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [
            pool.submit(_attempt, Session, barrier, uid, hotel_id, room_id, date(2024, 7, 1 + 2 * i), date(2024, 7, 2 + 2 * i))
            for i, uid in enumerate(user_ids)
        ]
        results = [f.result(timeout=60) for f in futures]

    assert all(isinstance(r, int) for r in results)
    assert len(set(results)) == WORKERS
