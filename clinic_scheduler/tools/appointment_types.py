"""Appointment type catalog with durations, colors, and device pool metadata."""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)

HOLTER_DEVICE_GROUP = "holterCardiac"


class AppointmentTypeConfigError(ValueError):
    """Raised when the appointment type catalog is inconsistent."""


class UnknownAppointmentTypeError(KeyError):
    """Raised when an appointment references a type id that is not registered."""


@dataclass(frozen=True)
class AppointmentType:
    """A bookable service type.

    Types that share a ``device_group`` draw from the same pool of
    devices, and each booking keeps its device for ``restriction_hours``
    after the appointment starts.
    """

    id: str
    name: str
    default_duration: int
    color: str
    device_group: Optional[str] = None
    restriction_hours: Optional[int] = None

    def __post_init__(self) -> None:
        if self.device_group and not self.restriction_hours:
            raise AppointmentTypeConfigError(
                f"Appointment type '{self.id}' has device group "
                f"'{self.device_group}' but no restriction hours"
            )
        if self.restriction_hours is not None and self.restriction_hours <= 0:
            raise AppointmentTypeConfigError(
                f"Appointment type '{self.id}' restriction hours must be > 0, "
                f"got {self.restriction_hours}"
            )

    @property
    def is_device_constrained(self) -> bool:
        return bool(self.device_group and self.restriction_hours)


APPOINTMENT_TYPES: list[AppointmentType] = [
    AppointmentType(
        id="holter24",
        name="Holter Cardiaco 24h",
        default_duration=30,
        color="#93C5FD",
        device_group=HOLTER_DEVICE_GROUP,
        restriction_hours=26,
    ),
    AppointmentType(
        id="holter48",
        name="Holter Cardiaco 48h",
        default_duration=30,
        color="#A5B4FC",
        device_group=HOLTER_DEVICE_GROUP,
        restriction_hours=50,
    ),
    AppointmentType(
        id="holter72",
        name="Holter Cardiaco 72h",
        default_duration=30,
        color="#C4B5FD",
        device_group=HOLTER_DEVICE_GROUP,
        restriction_hours=74,
    ),
    AppointmentType(id="holterPress", name="Holter Pressorio", default_duration=30, color="#DDD6FE"),
    AppointmentType(id="ecg", name="ECG", default_duration=20, color="#F5D0FE"),
]


class AppointmentTypeRegistry:
    """
    Read-only lookup table of appointment types keyed by id.

    The mapping is built once; unknown ids fail fast with
    UnknownAppointmentTypeError instead of silently matching nothing.
    """

    def __init__(self, types: Iterable[AppointmentType]) -> None:
        self._types: dict[str, AppointmentType] = {}
        for appointment_type in types:
            if appointment_type.id in self._types:
                raise AppointmentTypeConfigError(
                    f"Duplicate appointment type id: '{appointment_type.id}'"
                )
            self._types[appointment_type.id] = appointment_type
        logger.debug("Appointment type registry built with %d types", len(self._types))

    def get(self, type_id: str) -> AppointmentType:
        """Return the type for ``type_id``.

        Raises:
            UnknownAppointmentTypeError: If the id is not registered.
        """
        try:
            return self._types[type_id]
        except KeyError:
            raise UnknownAppointmentTypeError(
                f"Appointment type '{type_id}' not registered. Available: {list(self._types)}"
            ) from None

    def find(self, type_id: Optional[str]) -> Optional[AppointmentType]:
        """Return the type for ``type_id`` or None when missing."""
        if not type_id:
            return None
        return self._types.get(type_id)

    def all(self) -> list[AppointmentType]:
        """Return every type in catalog order."""
        return list(self._types.values())

    def in_group(self, device_group: str) -> list[AppointmentType]:
        """Return the types that draw from ``device_group``."""
        return [t for t in self._types.values() if t.device_group == device_group]

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._types

    def __iter__(self) -> Iterator[AppointmentType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


DEFAULT_REGISTRY = AppointmentTypeRegistry(APPOINTMENT_TYPES)
