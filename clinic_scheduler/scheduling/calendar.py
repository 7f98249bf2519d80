"""
Calendar surface owning the session's appointments.

Slot and event selections open a form controller. Every write path,
including direct ``add`` and ``update`` calls, re-checks the device pool
so a Holter booking can never overbook it. Render props (titles, colors,
widget labels) are produced here so any front end can draw the calendar
without knowing the type catalog.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from clinic_scheduler.logging_context import get_session_logger
from clinic_scheduler.messages.labels import (
    APP_TITLE,
    CALENDAR_FORMATS,
    CALENDAR_MESSAGES,
    DEFAULT_EVENT_COLOR,
)
from clinic_scheduler.messages.templates import build_event_title
from clinic_scheduler.schemas.appointment_schema import Appointment, SlotSelection
from clinic_scheduler.schemas.availability_schema import DeviceAvailability
from clinic_scheduler.scheduling.form_controller import (
    AppointmentFormController,
    FormMode,
    FormModeError,
)
from clinic_scheduler.tools.appointment_types import DEFAULT_REGISTRY, AppointmentTypeRegistry
from clinic_scheduler.tools.availability import check_device_availability

logger = get_session_logger(__name__)


class AppointmentNotFoundError(KeyError):
    """Raised when no appointment with the given id is on the calendar."""


class DeviceUnavailableError(ValueError):
    """Raised when a device-bound appointment would overbook its pool."""

    def __init__(self, message: str, verdict: DeviceAvailability) -> None:
        super().__init__(message)
        self.verdict = verdict


@dataclass(frozen=True)
class CalendarEvent:
    """Render props for one appointment block."""
    id: str
    title: str
    start: datetime
    end: datetime
    style: dict[str, Any]


class CalendarSurface:
    """Holds the appointment collection and dispatches user gestures to the form."""

    def __init__(
        self,
        registry: AppointmentTypeRegistry = DEFAULT_REGISTRY,
        appointments: Optional[Iterable[Appointment]] = None,
        total_devices: Optional[int] = None,
    ) -> None:
        self._registry = registry
        self._total_devices = total_devices
        self._appointments: list[Appointment] = []
        self._active_form: Optional[AppointmentFormController] = None
        for appointment in appointments or []:
            self.add(appointment)

    @property
    def registry(self) -> AppointmentTypeRegistry:
        return self._registry

    @property
    def total_devices(self) -> Optional[int]:
        return self._total_devices

    @property
    def appointments(self) -> list[Appointment]:
        return list(self._appointments)

    @property
    def active_form(self) -> Optional[AppointmentFormController]:
        return self._active_form

    @property
    def is_form_open(self) -> bool:
        return self._active_form is not None

    # ------------------------------------------------------------------ #
    # Collection
    # ------------------------------------------------------------------ #

    def get(self, appointment_id: str) -> Appointment:
        return self._appointments[self._index_of(appointment_id)]

    def add(self, appointment: Appointment) -> Appointment:
        """Append a new appointment if its type is registered and a device is free."""
        self._check_devices(appointment, self._appointments)
        self._appointments.append(appointment)
        logger.info(
            "Appointment created: %s (%s) at %s",
            appointment.id, appointment.appointment_type, appointment.start.isoformat(),
        )
        return appointment

    def update(self, appointment: Appointment) -> Appointment:
        """Replace the appointment with the same id, keeping its position."""
        index = self._index_of(appointment.id)
        others = [apt for apt in self._appointments if apt.id != appointment.id]
        self._check_devices(appointment, others)
        self._appointments[index] = appointment
        logger.info("Appointment updated: %s", appointment.id)
        return appointment

    def remove(self, appointment_id: str) -> None:
        # In place: open forms hold a reference to this list.
        del self._appointments[self._index_of(appointment_id)]
        logger.info("Appointment deleted: %s", appointment_id)

    def _index_of(self, appointment_id: str) -> int:
        for index, existing in enumerate(self._appointments):
            if existing.id == appointment_id:
                return index
        raise AppointmentNotFoundError(f"Appointment {appointment_id} not found")

    def _check_devices(self, appointment: Appointment, others: list[Appointment]) -> None:
        appointment_type = self._registry.get(appointment.appointment_type)
        if not appointment_type.is_device_constrained:
            return
        verdict = check_device_availability(
            others,
            appointment_type,
            appointment.start,
            registry=self._registry,
            total_devices=self._total_devices,
        )
        if not verdict.available:
            logger.warning(
                "Rejected %s for %s at %s: device pool exhausted",
                appointment.id, appointment_type.id, appointment.start.isoformat(),
            )
            raise DeviceUnavailableError(
                f"No {appointment_type.device_group} device free at "
                f"{appointment.start.isoformat()}",
                verdict,
            )

    # ------------------------------------------------------------------ #
    # Gestures
    # ------------------------------------------------------------------ #

    def select_slot(self, start: datetime, end: datetime) -> AppointmentFormController:
        """Open a blank form for an empty slot."""
        slot = SlotSelection(start=start, end=end)
        self._active_form = AppointmentFormController.for_slot(
            slot, self._appointments, self._registry, self._total_devices
        )
        return self._active_form

    def select_event(self, appointment_id: str) -> AppointmentFormController:
        """Open an edit form for an existing appointment."""
        appointment = self.get(appointment_id)
        self._active_form = AppointmentFormController.for_appointment(
            appointment, self._appointments, self._registry, self._total_devices
        )
        return self._active_form

    def save_form(self) -> Optional[Appointment]:
        """
        Submit the open form and store the result.

        Returns None and keeps the form open when the submission is blocked.
        """
        form = self._require_form()
        appointment = form.submit()
        if appointment is None:
            return None
        if form.mode == FormMode.EDIT:
            self.update(appointment)
        else:
            self.add(appointment)
        self._active_form = None
        return appointment

    def delete_form(self) -> str:
        """Delete the appointment shown in the open edit form."""
        form = self._require_form()
        appointment_id = form.request_delete()
        self.remove(appointment_id)
        self._active_form = None
        return appointment_id

    def close_form(self) -> None:
        self._active_form = None

    def _require_form(self) -> AppointmentFormController:
        if self._active_form is None:
            raise FormModeError("No appointment form is open")
        return self._active_form

    # ------------------------------------------------------------------ #
    # Render props
    # ------------------------------------------------------------------ #

    def event_title(self, appointment: Appointment) -> str:
        appointment_type = self._registry.find(appointment.appointment_type)
        type_name = appointment_type.name if appointment_type else appointment.appointment_type
        return build_event_title(type_name, appointment.patient_name, appointment.phone_number)

    def event_style(self, appointment: Appointment) -> dict[str, Any]:
        appointment_type = self._registry.find(appointment.appointment_type)
        return {
            "backgroundColor": appointment_type.color if appointment_type else DEFAULT_EVENT_COLOR,
            "border": "none",
            "boxShadow": "0 1px 3px rgba(0,0,0,0.12)",
            "borderRadius": "0.5rem",
            "padding": "0.25rem 0.5rem",
        }

    def render_events(
        self,
        range_start: Optional[datetime] = None,
        range_end: Optional[datetime] = None,
    ) -> list[CalendarEvent]:
        """Return render props for appointments overlapping the visible range, by start."""
        events = []
        for appointment in sorted(self._appointments, key=lambda apt: apt.start):
            end = appointment.end or appointment.start
            if range_start is not None and end < range_start:
                continue
            if range_end is not None and appointment.start > range_end:
                continue
            events.append(CalendarEvent(
                id=appointment.id,
                title=self.event_title(appointment),
                start=appointment.start,
                end=end,
                style=self.event_style(appointment),
            ))
        return events

    def widget_props(
        self,
        range_start: Optional[datetime] = None,
        range_end: Optional[datetime] = None,
    ) -> dict[str, Any]:
        """Return the props handed to the calendar widget."""
        return {
            "title": APP_TITLE,
            "events": self.render_events(range_start, range_end),
            "messages": dict(CALENDAR_MESSAGES),
            "formats": dict(CALENDAR_FORMATS),
            "selectable": True,
        }
