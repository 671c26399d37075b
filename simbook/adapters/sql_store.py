"""
SQLAlchemy-backed reservation store.

Reservations are unique per (business, date, start minute) at the database
level. Overlaps with different start times are caught by re-checking the
day's reservations in the same transaction as the insert. That transaction
holds the database write lock from its first statement: SQLite files are
opened with BEGIN IMMEDIATE, other backends run at SERIALIZABLE isolation.
Within one process a lock additionally queues writers.
"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from threading import Lock
from typing import List, Optional

from sqlalchemy import Column, Date, Index, Integer, UniqueConstraint, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..domain.availability import conflicting_reservations
from ..domain.exceptions import SlotUnavailable
from ..domain.models import Reservation
from ..domain.pricing import CENTS
from ..domain.time_model import TimeOfDay

logger = logging.getLogger(__name__)

Base = declarative_base()


class ReservationRecord(Base):
    """Represents a persisted reservation."""
    __tablename__ = "reservations"
    __table_args__ = (
        UniqueConstraint("business_id", "date", "start_minute", name="uq_reservations_business_date_start"),
        Index("idx_reservations_business_date", "business_id", "date"),
    )

    id = Column(Integer, primary_key=True)
    business_id = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    start_minute = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price_cents = Column(Integer, nullable=False)

    @classmethod
    def from_domain(cls, reservation: Reservation) -> "ReservationRecord":
        cents = (Decimal(reservation.price) * 100).to_integral_value(rounding=ROUND_HALF_UP)
        return cls(
            business_id=reservation.business_id,
            date=reservation.date,
            start_minute=reservation.start_time.minutes,
            duration_minutes=reservation.duration,
            price_cents=int(cents),
        )

    def to_domain(self) -> Reservation:
        return Reservation(
            id=self.id,
            business_id=self.business_id,
            date=self.date,
            start_time=TimeOfDay(self.start_minute),
            duration=self.duration_minutes,
            price=(Decimal(self.price_cents) / 100).quantize(CENTS),
        )


_IMMEDIATE = "simbook_begin_immediate"


def _engine_options(database_url: str) -> dict:
    if not database_url.startswith("sqlite"):
        return {"isolation_level": "SERIALIZABLE"}
    options = {"connect_args": {"check_same_thread": False}}
    if _is_memory_sqlite(database_url):
        # one shared connection, otherwise every session sees an empty database
        options["poolclass"] = StaticPool
    return options


def _is_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


def _use_immediate_transactions(engine: Engine) -> None:
    """
    Let writers open SQLite transactions with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so a plain SELECT does not
    lock the file and two processes could both pass the overlap re-check.
    Sessions that ask for the ``simbook_begin_immediate`` execution option
    take the write lock up front; everything else begins DEFERRED.
    """
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(connection):
        mode = "IMMEDIATE" if connection.get_execution_options().get(_IMMEDIATE) else "DEFERRED"
        connection.exec_driver_sql(f"BEGIN {mode}")


class SqlReservationStore:
    """
    Reservation store on any SQLAlchemy-supported database.
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            if database_url is None:
                raise ValueError("Either database_url or engine is required")
            engine = create_engine(database_url, **_engine_options(database_url))

        self.engine = engine
        if engine.dialect.name == "sqlite" and not _is_memory_sqlite(str(engine.url)):
            _use_immediate_transactions(engine)
        self._session_factory = sessionmaker(autoflush=False, bind=engine)
        self._write_lock = Lock()

    def create_schema(self) -> None:
        """Create the reservations table if it does not exist."""
        Base.metadata.create_all(bind=self.engine)

    def list_reservations(self, business_id: int, day: Optional[date] = None) -> List[Reservation]:
        with self._session_factory() as session:
            query = session.query(ReservationRecord).filter(ReservationRecord.business_id == business_id)
            if day is not None:
                query = query.filter(ReservationRecord.date == day)
            records = query.order_by(ReservationRecord.date, ReservationRecord.start_minute).all()
            return [record.to_domain() for record in records]

    def create_reservation(self, reservation: Reservation) -> Reservation:
        """
        Re-check availability and insert in one transaction.

        Raises:
            SlotUnavailable: If the slot overlaps a committed reservation
        """
        with self._write_lock, self._session_factory() as session:
            try:
                session.connection(execution_options={_IMMEDIATE: True})
                existing = [
                    record.to_domain()
                    for record in session.query(ReservationRecord).filter(
                        ReservationRecord.business_id == reservation.business_id,
                        ReservationRecord.date == reservation.date,
                    )
                ]
                conflicts = conflicting_reservations(
                    reservation.start_time, reservation.duration, reservation.date, existing
                )
                if conflicts:
                    raise SlotUnavailable(
                        f"{reservation.start_time} on {reservation.date} overlaps reservation {conflicts[0].id}"
                    )

                record = ReservationRecord.from_domain(reservation)
                session.add(record)
                session.commit()
                session.refresh(record)
                return record.to_domain()

            except IntegrityError as exc:
                session.rollback()
                logger.warning("Unique constraint rejected reservation at %s on %s",
                               reservation.start_time, reservation.date)
                raise SlotUnavailable(
                    f"{reservation.start_time} on {reservation.date} is already booked"
                ) from exc

            except SQLAlchemyError:
                session.rollback()
                logger.exception("Could not store reservation")
                raise

    def delete_reservation(self, reservation_id: int) -> bool:
        """Remove a reservation; returns False if it did not exist."""
        with self._write_lock, self._session_factory() as session:
            record = session.get(ReservationRecord, reservation_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()
            return True
