"""Data models for chamber events and their computed occurrences."""

import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class EventStatus(str, Enum):
    """CMS publishing status of an event."""

    PENDING = "pending"
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class RecurrenceType(str, Enum):
    """How often a recurring event repeats."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"


class MonthlyType(str, Enum):
    """How a monthly event picks its day."""

    DAY_OF_MONTH = "dayOfMonth"  # e.g. the 15th
    DAY_OF_WEEK = "dayOfWeek"  # e.g. the 2nd Tuesday


class RecurrenceSettings(BaseModel):
    """The ``recurrence`` group of an event record.

    Both members are optional here so that malformed CMS rows can still be
    loaded and reported; ``validate_recurrence`` decides whether they form a
    usable rule.
    """

    recurrence_type: Optional[RecurrenceType] = Field(
        default=None, alias="recurrenceType", description="weekly or monthly"
    )
    monthly_type: Optional[MonthlyType] = Field(
        default=None, alias="monthlyType", description="dayOfMonth or dayOfWeek"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True, use_enum_values=True)


class Event(BaseModel):
    """Event record as stored by the CMS (recurrence-relevant fields only)."""

    id: Union[int, str] = Field(..., description="Event ID")
    title: Optional[str] = Field(default=None, description="Display title")

    # Schedule
    date: datetime.datetime = Field(..., description="Anchor date: first or only occurrence")
    end_date: Optional[datetime.datetime] = Field(
        default=None,
        alias="endDate",
        description="End of multi-day event, or when a recurring series ends",
    )
    start_time: Optional[str] = Field(
        default=None, alias="startTime", description='Free-form, e.g. "10:00 AM"'
    )
    end_time: Optional[str] = Field(
        default=None, alias="endTime", description='Free-form, e.g. "2:00 PM"'
    )
    location: Optional[str] = Field(default=None, description="Venue/location name")

    # Recurrence
    is_recurring: bool = Field(default=False, alias="isRecurring")
    recurrence: Optional[RecurrenceSettings] = Field(default=None)

    # Publishing
    event_status: EventStatus = Field(default=EventStatus.PENDING, alias="eventStatus")

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        use_enum_values=True,
        extra="ignore",
    )

    @field_validator("date", "end_date", mode="before")
    @classmethod
    def coerce_bare_date(cls, value: Any) -> Any:
        """Accept bare dates (the CMS uses a day-only picker) as midnight."""
        if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
            return datetime.datetime.combine(value, datetime.time.min)
        return value

    @property
    def recurrence_type(self) -> Optional[str]:
        """Recurrence type value, or None when absent."""
        return self.recurrence.recurrence_type if self.recurrence else None

    @property
    def monthly_type(self) -> Optional[str]:
        """Monthly type value, or None when absent."""
        return self.recurrence.monthly_type if self.recurrence else None

    @field_serializer("date", "end_date", when_used="unless-none")
    def serialize_datetime(self, dt: datetime.datetime) -> str:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat()


class EventOccurrence(BaseModel):
    """One concrete calendar instance of an event. Never persisted."""

    event: Event = Field(..., description="Originating event")
    occurrence_date: datetime.datetime = Field(
        ..., alias="occurrenceDate", description="Local wall-clock date-time of this instance"
    )
    is_recurring_instance: bool = Field(
        ..., alias="isRecurringInstance", description="Generated from a recurring series"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def event_id(self) -> Union[int, str]:
        return self.event.id

    @property
    def start_time(self) -> Optional[str]:
        return self.event.start_time

    @property
    def end_time(self) -> Optional[str]:
        return self.event.end_time

    @field_serializer("occurrence_date")
    def serialize_occurrence_date(self, dt: datetime.datetime) -> str:
        """Serialize occurrence date to ISO format."""
        return dt.isoformat()

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict with the CMS's camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")
