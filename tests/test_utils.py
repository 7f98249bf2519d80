"""Tests for shared date helpers, message builders, and the logging context."""

import logging
from datetime import datetime

from clinic_scheduler.logging_context import (
    SessionIdFilter,
    get_session_id,
    get_session_logger,
    set_session_id,
)
from clinic_scheduler.messages.templates import (
    build_device_booked_message,
    build_event_title,
    build_last_device_message,
    build_unavailable_message,
)
from clinic_scheduler.utils import (
    add_hours,
    format_display_datetime,
    format_input_datetime,
    parse_input_datetime,
)


class TestDateHelpers:
    def test_add_hours_crosses_days(self):
        assert add_hours(datetime(2024, 1, 1, 9, 0), 26) == datetime(2024, 1, 2, 11, 0)

    def test_display_format(self):
        assert format_display_datetime(datetime(2024, 1, 2, 11, 0)) == "02/01/2024 alle 11:00"

    def test_display_fallback(self):
        assert format_display_datetime(None, "n/d") == "n/d"

    def test_input_round_trip(self):
        value = datetime(2024, 3, 5, 8, 15)
        assert parse_input_datetime(format_input_datetime(value)) == value

    def test_parse_accepts_space_separator(self):
        assert parse_input_datetime(" 2024-01-01 09:00 ") == datetime(2024, 1, 1, 9, 0)


class TestMessages:
    def test_unavailable_with_date(self):
        msg = build_unavailable_message(datetime(2024, 1, 2, 11, 0))
        assert msg.startswith("Tutti i dispositivi Holter sono occupati")
        assert "fino al 02/01/2024 alle 11:00." in msg

    def test_unavailable_without_date(self):
        assert "fino al data non disponibile." in build_unavailable_message(None)

    def test_last_device(self):
        msg = build_last_device_message(datetime(2024, 1, 3, 12, 0))
        assert "03/01/2024 alle 12:00" in msg
        assert msg.endswith("È possibile procedere con la prenotazione.")

    def test_device_booked(self):
        msg = build_device_booked_message(datetime(2024, 1, 2, 11, 0))
        assert msg == "Questo dispositivo sarà occupato fino al 02/01/2024 alle 11:00."

    def test_event_title(self):
        assert build_event_title("ECG", "Anna", "333") == "ECG - Anna (333)"


class TestSessionLogging:
    def test_set_and_get_session_id(self):
        set_session_id("SES-TEST01")
        assert get_session_id() == "SES-TEST01"

    def test_filter_attached_once(self):
        logger = get_session_logger("clinic_scheduler.tests.session")
        get_session_logger("clinic_scheduler.tests.session")
        assert sum(isinstance(f, SessionIdFilter) for f in logger.filters) == 1

    def test_filter_tags_records(self):
        set_session_id("SES-TAG")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert SessionIdFilter().filter(record)
        assert record.session_id == "SES-TAG"
