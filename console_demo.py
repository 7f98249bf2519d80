"""
Offline console demo: drives the real calendar and scheduling form from a terminal.

Every command goes through CalendarSurface and AppointmentFormController,
so the output shows exactly the warnings and gating a browser front end
would display.

Commands:
    book <type> <YYYY-MM-DDTHH:MM> <patient name> / <phone>
    check <type> <YYYY-MM-DDTHH:MM>
    move <id-prefix> <YYYY-MM-DDTHH:MM>
    delete <id-prefix>
    list | types | help | quit

Usage:
    python console_demo.py
    python console_demo.py --scenario full
"""

import argparse
import uuid
from datetime import datetime
from typing import Optional

from clinic_scheduler.config import settings
from clinic_scheduler.logging_context import set_session_id
from clinic_scheduler.messages.labels import APP_TITLE
from clinic_scheduler.scheduling.calendar import AppointmentNotFoundError, CalendarSurface
from clinic_scheduler.scheduling.form_controller import (
    AppointmentFormController,
    AvailabilityWarning,
    WarningLevel,
)
from clinic_scheduler.tools.appointment_types import UnknownAppointmentTypeError
from clinic_scheduler.tools.availability import count_available_devices
from clinic_scheduler.utils import add_minutes, format_input_datetime, parse_input_datetime

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

LEVEL_COLORS = {
    WarningLevel.INFO: BLUE,
    WarningLevel.WARNING: YELLOW,
    WarningLevel.ERROR: RED,
}


class ConsoleSession:
    """Runs scheduling commands against an in-memory calendar."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "holter": [
            "book holter24 2024-01-01T09:00 Mario Rossi / 333 1234567",
            "check holter48 2024-01-01T10:00",
            "book holter48 2024-01-01T10:00 Giulia Bianchi / 333 7654321",
            "list",
        ],
        "full": [
            "book holter24 2024-01-01T09:00 Mario Rossi / 333 1234567",
            "book holter48 2024-01-01T10:00 Giulia Bianchi / 333 7654321",
            "book holter72 2024-01-01T11:00 Luca Verdi / 333 0000000",
            "check holter24 2024-01-02T11:00",
            "check holter24 2024-01-02T11:01",
            "list",
        ],
        "ecg": [
            "book holter24 2024-01-01T09:00 Mario Rossi / 333 1234567",
            "book holter48 2024-01-01T10:00 Giulia Bianchi / 333 7654321",
            "book ecg 2024-01-01T11:00 Anna Neri / 333 1112222",
            "list",
        ],
    }

    MAX_INPUT_LENGTH = 200

    def __init__(self, calendar: Optional[CalendarSurface] = None) -> None:
        self.calendar = calendar or CalendarSurface()

    def say(self, text: str, color: str = GREEN) -> None:
        print(f"{color}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def show_warning(self, warning: AvailabilityWarning) -> None:
        if not warning.show:
            self.system_log("No device restriction for this type.")
            return
        color = LEVEL_COLORS.get(warning.level, RESET)
        self.say(f"[{warning.level.value.upper()}] {warning.message}", color)

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {APP_TITLE} - {title}{RESET}")
        print(f"{BOLD}  Clinic: {settings.clinic.name}{RESET}")
        print(f"{BOLD}  Holter devices: {settings.devices.total_holter_devices}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}> {RESET}{step}")
            self.process(step)

        print(f"\n{BOLD}  Scenario '{scenario}' complete.{RESET}")

    def run(self) -> None:
        self._banner("Console Demo")
        print(f"{BOLD}  Type 'help' for commands, 'quit' to exit{RESET}")

        while True:
            user_input = input(f"\n{BLUE}> {RESET}").strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                return
            if len(user_input) > self.MAX_INPUT_LENGTH:
                self.say("Command too long.", RED)
                continue
            self.process(user_input)

    def process(self, text: str) -> None:
        command, _, rest = text.strip().partition(" ")
        handlers = {
            "book": self._handle_book,
            "check": self._handle_check,
            "move": self._handle_move,
            "delete": self._handle_delete,
            "list": lambda _: self._handle_list(),
            "types": lambda _: self._handle_types(),
            "help": lambda _: print(__doc__),
        }
        handler = handlers.get(command.lower())
        if handler is None:
            self.say(f"Unknown command '{command}'. Type 'help'.", RED)
            return
        try:
            handler(rest.strip())
        except (UnknownAppointmentTypeError, AppointmentNotFoundError) as exc:
            self.say(str(exc.args[0]), RED)
        except ValueError as exc:
            self.say(str(exc), RED)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def _open_form(self, start: datetime) -> AppointmentFormController:
        end = add_minutes(start, settings.form.default_duration)
        return self.calendar.select_slot(start, end)

    def _handle_book(self, args: str) -> None:
        head, _, phone = args.partition("/")
        parts = head.split(maxsplit=2)
        if len(parts) < 3 or not phone.strip():
            raise ValueError("Usage: book <type> <YYYY-MM-DDTHH:MM> <patient name> / <phone>")
        type_id, start_raw, patient = parts

        form = self._open_form(parse_input_datetime(start_raw))
        self.show_warning(form.select_appointment_type(type_id))
        form.set_patient_name(patient)
        form.set_phone_number(phone.strip())

        saved = self.calendar.save_form()
        if saved is None:
            self.calendar.close_form()
            self.say("Booking not saved.", RED)
            return
        self.say(f"Saved {saved.id[:8]}: {self.calendar.event_title(saved)}")

    def _handle_check(self, args: str) -> None:
        parts = args.split()
        if len(parts) != 2:
            raise ValueError("Usage: check <type> <YYYY-MM-DDTHH:MM>")
        type_id, start_raw = parts
        start = parse_input_datetime(start_raw)
        appointment_type = self.calendar.registry.get(type_id)
        if appointment_type.is_device_constrained:
            free = count_available_devices(
                self.calendar.appointments,
                appointment_type,
                start,
                registry=self.calendar.registry,
                total_devices=self.calendar.total_devices,
            )
            self.system_log(f"Free devices at {format_input_datetime(start)}: {max(free, 0)}")

        form = self._open_form(start)
        self.show_warning(form.select_appointment_type(type_id))
        self.calendar.close_form()

    def _handle_move(self, args: str) -> None:
        parts = args.split()
        if len(parts) != 2:
            raise ValueError("Usage: move <id-prefix> <YYYY-MM-DDTHH:MM>")
        appointment_id = self._resolve_id(parts[0])
        form = self.calendar.select_event(appointment_id)
        self.show_warning(form.change_start(parse_input_datetime(parts[1])))
        if self.calendar.save_form() is None:
            self.calendar.close_form()
            self.say("Appointment not moved.", RED)
            return
        self.say(f"Moved {appointment_id[:8]}.")

    def _handle_delete(self, args: str) -> None:
        appointment_id = self._resolve_id(args)
        self.calendar.select_event(appointment_id)
        self.calendar.delete_form()
        self.say(f"Deleted {appointment_id[:8]}.")

    def _handle_list(self) -> None:
        events = self.calendar.render_events()
        if not events:
            self.system_log("Calendar is empty.")
            return
        for event in events:
            print(
                f"  {event.id[:8]}  {format_input_datetime(event.start)} -> "
                f"{event.end.strftime('%H:%M')}  {event.title}"
            )

    def _handle_types(self) -> None:
        for appointment_type in self.calendar.registry:
            restriction = (
                f"device {appointment_type.restriction_hours}h"
                if appointment_type.is_device_constrained else "no device"
            )
            print(
                f"  {appointment_type.id:<12} {appointment_type.name:<22} "
                f"{appointment_type.default_duration} min, {restriction}"
            )

    def _resolve_id(self, prefix: str) -> str:
        prefix = prefix.strip()
        matches = [apt.id for apt in self.calendar.appointments if apt.id.startswith(prefix)]
        if len(matches) != 1 or not prefix:
            raise AppointmentNotFoundError(f"No unique appointment matches '{prefix}'")
        return matches[0]


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Clinic scheduler console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        help="Run a pre-scripted scenario instead of the interactive prompt",
    )
    args = parser.parse_args(argv)

    set_session_id(f"SES-{uuid.uuid4().hex[:6].upper()}")
    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
