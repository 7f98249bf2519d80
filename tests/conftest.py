"""Shared test fixtures and helpers."""

from datetime import datetime
from typing import Optional

import pytest

from clinic_scheduler.schemas.appointment_schema import Appointment
from clinic_scheduler.scheduling.calendar import CalendarSurface
from clinic_scheduler.tools.appointment_types import DEFAULT_REGISTRY

BASE_TIME = datetime(2024, 1, 1, 9, 0)


@pytest.fixture
def registry():
    return DEFAULT_REGISTRY


@pytest.fixture
def calendar():
    return CalendarSurface(total_devices=2)


def make_appointment(
    appointment_type: str = "holter24",
    start: datetime = BASE_TIME,
    patient_name: str = "Mario Rossi",
    phone_number: str = "333 1234567",
    duration: int = 30,
    appointment_id: Optional[str] = None,
) -> Appointment:
    """Helper to create an Appointment with sensible defaults."""
    kwargs = {}
    if appointment_id is not None:
        kwargs["id"] = appointment_id
    return Appointment(
        appointment_type=appointment_type,
        start=start,
        duration=duration,
        patient_name=patient_name,
        phone_number=phone_number,
        **kwargs,
    )
