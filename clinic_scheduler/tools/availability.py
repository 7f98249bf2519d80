"""
Shared device pool availability.

Holter monitors are a small physical pool shared by every appointment
type in the same device group. A device handed out at an appointment's
start stays unavailable for that type's restriction hours, which is
longer than the calendar block to cover device return and turnaround.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from clinic_scheduler.config import settings
from clinic_scheduler.schemas.appointment_schema import Appointment
from clinic_scheduler.schemas.availability_schema import DeviceAvailability
from clinic_scheduler.tools.appointment_types import (
    DEFAULT_REGISTRY,
    AppointmentType,
    AppointmentTypeRegistry,
)
from clinic_scheduler.utils import add_hours

logger = logging.getLogger(__name__)


def occupancy_end(
    appointment: Appointment, registry: AppointmentTypeRegistry = DEFAULT_REGISTRY
) -> Optional[datetime]:
    """Return when the appointment's device is released, or None if it holds no device."""
    appointment_type = registry.get(appointment.appointment_type)
    if not appointment_type.is_device_constrained:
        return None
    return add_hours(appointment.start, appointment_type.restriction_hours)


def check_device_availability(
    appointments: Iterable[Appointment],
    appointment_type: AppointmentType,
    start_date: datetime,
    *,
    registry: AppointmentTypeRegistry = DEFAULT_REGISTRY,
    total_devices: Optional[int] = None,
) -> DeviceAvailability:
    """
    Check whether a device from the type's pool is free at ``start_date``.

    An existing appointment conflicts when it belongs to the same device
    group and ``start_date`` falls within ``[start, start + restriction_hours]``
    of that appointment, both ends inclusive. Types without a device group
    are always available and report zero counts.

    Returns a verdict with in-use and remaining counts, the earliest
    release time when the pool is exhausted (``next_available_date``),
    the latest release time among the conflicts (``restriction_end``),
    and the conflicts themselves ordered by release time.
    """
    if not appointment_type.device_group or not appointment_type.restriction_hours:
        return DeviceAvailability(available=True, in_use_count=0, remaining_devices=0)

    pool_size = settings.devices.total_holter_devices if total_devices is None else total_devices

    # (release time, appointment) for each same-group booking covering start_date
    conflicts: list[tuple[datetime, Appointment]] = []
    for apt in appointments:
        apt_type = registry.get(apt.appointment_type)
        if apt_type.device_group != appointment_type.device_group:
            continue
        if not apt_type.restriction_hours:
            continue
        released_at = add_hours(apt.start, apt_type.restriction_hours)
        if apt.start <= start_date <= released_at:
            conflicts.append((released_at, apt))

    in_use_count = len(conflicts)
    remaining_devices = pool_size - in_use_count
    available = remaining_devices > 0

    next_available_date: Optional[datetime] = None
    restriction_end: Optional[datetime] = None

    if conflicts:
        conflicts.sort(key=lambda entry: entry[0])
        if not available:
            next_available_date = conflicts[0][0]
        restriction_end = conflicts[-1][0]

    logger.debug(
        "Device check for %s at %s: %d in use, %d remaining",
        appointment_type.id, start_date.isoformat(), in_use_count, remaining_devices,
    )

    return DeviceAvailability(
        available=available,
        in_use_count=in_use_count,
        remaining_devices=remaining_devices,
        next_available_date=next_available_date,
        restriction_end=restriction_end,
        conflicting_appointments=[apt for _, apt in conflicts],
    )


def count_available_devices(
    appointments: Iterable[Appointment],
    appointment_type: AppointmentType,
    start_date: datetime,
    *,
    registry: AppointmentTypeRegistry = DEFAULT_REGISTRY,
    total_devices: Optional[int] = None,
) -> int:
    """Return how many devices of the type's pool are free at ``start_date``."""
    return check_device_availability(
        appointments,
        appointment_type,
        start_date,
        registry=registry,
        total_devices=total_devices,
    ).remaining_devices
