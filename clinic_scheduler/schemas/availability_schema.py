"""Device availability verdict model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from clinic_scheduler.schemas.appointment_schema import Appointment


class DeviceAvailability(BaseModel):
    """Result of checking the shared device pool at a candidate time."""
    available: bool
    in_use_count: int = 0
    remaining_devices: int = 0
    next_available_date: Optional[datetime] = None
    restriction_end: Optional[datetime] = None
    conflicting_appointments: list[Appointment] = Field(default_factory=list)
