from clinic_scheduler.scheduling.calendar import (
    AppointmentNotFoundError,
    CalendarEvent,
    CalendarSurface,
    DeviceUnavailableError,
)
from clinic_scheduler.scheduling.form_controller import (
    AppointmentFormController,
    AvailabilityWarning,
    FormMode,
    FormModeError,
    WarningLevel,
)

__all__ = [
    "CalendarSurface",
    "CalendarEvent",
    "AppointmentNotFoundError",
    "DeviceUnavailableError",
    "AppointmentFormController",
    "AvailabilityWarning",
    "FormMode",
    "FormModeError",
    "WarningLevel",
]
