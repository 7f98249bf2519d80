"""Appointment and calendar slot data models."""

import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints, model_validator

from clinic_scheduler.config import settings
from clinic_scheduler.utils import add_minutes

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def new_appointment_id() -> str:
    return str(uuid.uuid4())


class Appointment(BaseModel):
    """A booked appointment held in the session's calendar.

    ``end`` is derived from ``start + duration`` when omitted. An explicit
    ``end`` must match that value.
    """

    id: str = Field(default_factory=new_appointment_id)
    title: str = ""
    appointment_type: RequiredText
    start: datetime
    end: Optional[datetime] = None
    duration: int = Field(
        default=settings.form.default_duration,
        ge=settings.form.min_duration,
        le=settings.form.max_duration,
        multiple_of=settings.form.duration_step,
    )
    patient_name: RequiredText
    phone_number: RequiredText

    @model_validator(mode="after")
    def _derive_end(self) -> "Appointment":
        expected = add_minutes(self.start, self.duration)
        if self.end is None:
            self.end = expected
        elif self.end != expected:
            raise ValueError(
                f"end must equal start + duration ({expected.isoformat()}), "
                f"got {self.end.isoformat()}"
            )
        return self


class SlotSelection(BaseModel):
    """An empty calendar range picked by the user."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "SlotSelection":
        if self.end < self.start:
            raise ValueError("slot end must not precede slot start")
        return self
