"""Message builders for availability warnings and calendar event titles."""

from datetime import datetime
from typing import Optional

from clinic_scheduler.config import settings
from clinic_scheduler.utils import format_display_datetime


def build_unavailable_message(next_available: Optional[datetime]) -> str:
    """Error shown when every device of the pool is taken at the chosen time."""
    next_date = format_display_datetime(next_available, settings.display.unavailable_label)
    return (
        f"Tutti i dispositivi Holter sono occupati in questa fascia oraria fino al {next_date}. "
        "Seleziona un'altra data o orario."
    )


def build_last_device_message(restriction_end: Optional[datetime]) -> str:
    """Warning shown when the booking would take the last free device."""
    until = format_display_datetime(restriction_end)
    return (
        f"Ultimo dispositivo Holter disponibile fino al {until}. "
        "È possibile procedere con la prenotazione."
    )


def build_device_booked_message(occupied_until: datetime) -> str:
    """Info shown with the release time of the device this booking would take."""
    return f"Questo dispositivo sarà occupato fino al {format_display_datetime(occupied_until)}."


def build_event_title(type_name: str, patient_name: str, phone_number: str) -> str:
    return f"{type_name} - {patient_name} ({phone_number})"
