from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field

from ..core.timeutil import as_utc, utcnow


class UTCDateTime(TypeDecorator):
    """Stores naive UTC, hands back aware UTC datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class Event(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint('"end" > "start"', name="ck_event_end_after_start"),
    )

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str
    start: datetime = Field(sa_column=Column(UTCDateTime(), nullable=False, index=True))
    end: datetime = Field(sa_column=Column(UTCDateTime(), nullable=False))
    all_day: bool = Field(default=False, nullable=False)
    description: Optional[str] = None
    location: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False))
