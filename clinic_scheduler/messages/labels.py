"""
Italian UI labels for the scheduling form and calendar.

Front ends render these as-is; the calendar toolbar labels and formats
are passed straight through to the calendar widget.
"""

APP_TITLE = "Gestione Appuntamenti"

NEW_APPOINTMENT_TITLE = "Nuovo Appuntamento"
EDIT_APPOINTMENT_TITLE = "Modifica Appuntamento"

FIELD_LABELS: dict[str, str] = {
    "appointment_type": "Tipo di Appuntamento",
    "patient_name": "Nome Paziente",
    "phone_number": "Numero di Telefono",
    "start": "Data e Ora",
    "duration": "Durata (minuti)",
}

SELECT_TYPE_PLACEHOLDER = "Seleziona tipo"

SAVE_BUTTON = "Salva"
DELETE_BUTTON = "Elimina"

CALENDAR_MESSAGES: dict[str, str] = {
    "next": "Successivo",
    "previous": "Precedente",
    "today": "Oggi",
    "month": "Mese",
    "week": "Settimana",
    "day": "Giorno",
    "agenda": "Agenda",
    "date": "Data",
    "time": "Ora",
    "event": "Evento",
}

CALENDAR_FORMATS: dict[str, str] = {
    "dateFormat": "dd/MM/yyyy",
    "timeGutterFormat": "HH:mm",
}

# Tailwind classes per warning level: background, text, icon
WARNING_STYLES: dict[str, dict[str, str]] = {
    "warning": {"bg": "bg-yellow-50", "text": "text-yellow-700", "icon": "text-yellow-400"},
    "error": {"bg": "bg-red-50", "text": "text-red-700", "icon": "text-red-400"},
    "info": {"bg": "bg-blue-50", "text": "text-blue-700", "icon": "text-blue-400"},
}

DEFAULT_EVENT_COLOR = "#gray"
