"""
Scheduling form controller with an availability-driven submit gate.

Every edit that can change the device verdict (type selection and start
time) re-runs the availability check synchronously before returning, so
the ``can_proceed`` flag read by ``submit()`` always reflects the latest
input. Duration edits only move the end time and do not re-check.

Usage:
    form = AppointmentFormController.for_slot(slot, calendar_appointments)
    form.select_appointment_type("holter24")
    form.set_patient_name("Mario Rossi")
    form.set_phone_number("333 1234567")
    if form.can_proceed:
        appointment = form.submit()
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Sequence

from clinic_scheduler.config import settings
from clinic_scheduler.logging_context import get_session_logger
from clinic_scheduler.messages.labels import (
    DELETE_BUTTON,
    EDIT_APPOINTMENT_TITLE,
    FIELD_LABELS,
    NEW_APPOINTMENT_TITLE,
    SAVE_BUTTON,
    SELECT_TYPE_PLACEHOLDER,
    WARNING_STYLES,
)
from clinic_scheduler.messages.templates import (
    build_device_booked_message,
    build_last_device_message,
    build_unavailable_message,
)
from clinic_scheduler.schemas.appointment_schema import (
    Appointment,
    SlotSelection,
    new_appointment_id,
)
from clinic_scheduler.schemas.availability_schema import DeviceAvailability
from clinic_scheduler.tools.appointment_types import (
    DEFAULT_REGISTRY,
    AppointmentType,
    AppointmentTypeRegistry,
)
from clinic_scheduler.tools.availability import check_device_availability
from clinic_scheduler.utils import add_hours, add_minutes, format_input_datetime

logger = get_session_logger(__name__)


class WarningLevel(str, Enum):
    """Severity of the availability notice shown above the form."""
    NONE = "none"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class FormModeError(Exception):
    """Raised when an action is not valid for the form's mode."""


@dataclass(frozen=True)
class AvailabilityWarning:
    """Notice derived from the last availability verdict."""
    show: bool = False
    message: str = ""
    can_proceed: bool = True
    level: WarningLevel = WarningLevel.NONE


NO_WARNING = AvailabilityWarning()


@dataclass
class FormData:
    """Editable field values of the scheduling form."""
    id: str
    start: datetime
    end: datetime
    title: str = ""
    appointment_type: str = ""
    patient_name: str = ""
    phone_number: str = ""
    duration: int = field(default_factory=lambda: settings.form.default_duration)


def warning_from_verdict(
    verdict: DeviceAvailability,
    appointment_type: AppointmentType,
    start: datetime,
) -> AvailabilityWarning:
    """Map an availability verdict to the notice shown for a device-bound type."""
    if not verdict.available:
        return AvailabilityWarning(
            show=True,
            message=build_unavailable_message(verdict.next_available_date),
            can_proceed=False,
            level=WarningLevel.ERROR,
        )
    if verdict.remaining_devices == 1:
        return AvailabilityWarning(
            show=True,
            message=build_last_device_message(verdict.restriction_end),
            can_proceed=True,
            level=WarningLevel.WARNING,
        )
    occupied_until = add_hours(start, appointment_type.restriction_hours or 0)
    return AvailabilityWarning(
        show=True,
        message=build_device_booked_message(occupied_until),
        can_proceed=True,
        level=WarningLevel.INFO,
    )


class AppointmentFormController:
    """
    Holds the form state for one create or edit session.

    The appointment list passed in is the calendar's full collection and
    is only read, never modified.
    """

    def __init__(
        self,
        data: FormData,
        mode: FormMode,
        existing_appointments: Sequence[Appointment],
        registry: AppointmentTypeRegistry = DEFAULT_REGISTRY,
        total_devices: Optional[int] = None,
    ) -> None:
        self._data = data
        self._mode = mode
        self._existing = existing_appointments
        self._registry = registry
        self._total_devices = total_devices
        self._warning = NO_WARNING
        self._last_verdict: Optional[DeviceAvailability] = None

    @classmethod
    def for_slot(
        cls,
        slot: SlotSelection,
        existing_appointments: Sequence[Appointment],
        registry: AppointmentTypeRegistry = DEFAULT_REGISTRY,
        total_devices: Optional[int] = None,
    ) -> "AppointmentFormController":
        """Open a blank form for a newly selected calendar slot."""
        data = FormData(id=new_appointment_id(), start=slot.start, end=slot.end)
        return cls(data, FormMode.CREATE, existing_appointments, registry, total_devices)

    @classmethod
    def for_appointment(
        cls,
        appointment: Appointment,
        existing_appointments: Sequence[Appointment],
        registry: AppointmentTypeRegistry = DEFAULT_REGISTRY,
        total_devices: Optional[int] = None,
    ) -> "AppointmentFormController":
        """Open a form populated from an existing appointment."""
        data = FormData(
            id=appointment.id,
            start=appointment.start,
            end=appointment.end or add_minutes(appointment.start, appointment.duration),
            title=appointment.title,
            appointment_type=appointment.appointment_type,
            patient_name=appointment.patient_name,
            phone_number=appointment.phone_number,
            duration=appointment.duration,
        )
        return cls(data, FormMode.EDIT, existing_appointments, registry, total_devices)

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def mode(self) -> FormMode:
        return self._mode

    @property
    def data(self) -> FormData:
        return self._data

    @property
    def warning(self) -> AvailabilityWarning:
        return self._warning

    @property
    def can_proceed(self) -> bool:
        return self._warning.can_proceed

    @property
    def last_verdict(self) -> Optional[DeviceAvailability]:
        return self._last_verdict

    @property
    def title(self) -> str:
        return EDIT_APPOINTMENT_TITLE if self._mode == FormMode.EDIT else NEW_APPOINTMENT_TITLE

    @property
    def selected_type(self) -> Optional[AppointmentType]:
        return self._registry.find(self._data.appointment_type)

    # ------------------------------------------------------------------ #
    # Edits
    # ------------------------------------------------------------------ #

    def select_appointment_type(self, type_id: str) -> AvailabilityWarning:
        """Select a type, reset duration to its default, and re-check availability."""
        appointment_type = self._registry.get(type_id)
        self._data.appointment_type = appointment_type.id
        self._data.duration = appointment_type.default_duration
        self._data.end = add_minutes(self._data.start, self._data.duration)

        if appointment_type.device_group:
            self._refresh_availability(appointment_type)
        else:
            self._warning = NO_WARNING
            self._last_verdict = None
        return self._warning

    def change_start(self, new_start: datetime) -> AvailabilityWarning:
        """Move the start time and re-check availability for device-bound types."""
        self._data.start = new_start
        self._data.end = add_minutes(new_start, self._data.duration)

        appointment_type = self.selected_type
        if appointment_type is not None and appointment_type.device_group:
            self._refresh_availability(appointment_type)
        return self._warning

    def change_duration(self, minutes: int) -> None:
        """Change the duration and end time. Availability is not re-checked."""
        form = settings.form
        if not form.min_duration <= minutes <= form.max_duration or minutes % form.duration_step:
            raise ValueError(
                f"Duration must be between {form.min_duration} and {form.max_duration} "
                f"minutes in steps of {form.duration_step}, got {minutes}"
            )
        self._data.duration = minutes
        self._data.end = add_minutes(self._data.start, minutes)

    def set_patient_name(self, name: str) -> None:
        self._data.patient_name = name

    def set_phone_number(self, phone: str) -> None:
        self._data.phone_number = phone

    def _refresh_availability(self, appointment_type: AppointmentType) -> None:
        verdict = check_device_availability(
            self._existing,
            appointment_type,
            self._data.start,
            registry=self._registry,
            total_devices=self._total_devices,
        )
        self._last_verdict = verdict
        self._warning = warning_from_verdict(verdict, appointment_type, self._data.start)
        logger.debug(
            "Availability refreshed for %s at %s: %s",
            appointment_type.id, self._data.start.isoformat(), self._warning.level.value,
        )

    # ------------------------------------------------------------------ #
    # Submission
    # ------------------------------------------------------------------ #

    def submit(self) -> Optional[Appointment]:
        """
        Build the appointment from the form if the gate allows it.

        Returns:
            The appointment to save, or None when the device pool is
            exhausted at the chosen time.

        Raises:
            pydantic.ValidationError: If a required field is empty or the
                duration is out of range.
        """
        if not self._warning.can_proceed:
            logger.warning(
                "Submission blocked for %s: %s", self._data.id, self._warning.message
            )
            return None
        data = self._data
        return Appointment(
            id=data.id,
            title=data.title,
            appointment_type=data.appointment_type,
            start=data.start,
            end=data.end,
            duration=data.duration,
            patient_name=data.patient_name,
            phone_number=data.phone_number,
        )

    def render_props(self) -> dict[str, Any]:
        """Return everything a front end needs to draw the form."""
        data = self._data
        form = settings.form
        return {
            "title": self.title,
            "labels": dict(FIELD_LABELS),
            "type_options": [{"value": "", "label": SELECT_TYPE_PLACEHOLDER}] + [
                {"value": t.id, "label": t.name} for t in self._registry
            ],
            "values": {
                "appointment_type": data.appointment_type,
                "patient_name": data.patient_name,
                "phone_number": data.phone_number,
                "start": format_input_datetime(data.start),
                "duration": data.duration,
            },
            "duration_limits": {
                "min": form.min_duration,
                "max": form.max_duration,
                "step": form.duration_step,
            },
            "warning": {
                "show": self._warning.show,
                "message": self._warning.message,
                "level": self._warning.level.value,
                "style": WARNING_STYLES.get(self._warning.level.value),
            },
            "can_proceed": self._warning.can_proceed,
            "save_label": SAVE_BUTTON,
            "delete_label": DELETE_BUTTON if self._mode == FormMode.EDIT else None,
        }

    def request_delete(self) -> str:
        """Return the id of the appointment being edited for deletion."""
        if self._mode != FormMode.EDIT:
            raise FormModeError("Only an existing appointment can be deleted")
        return self._data.id
