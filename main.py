"""
Clinic scheduler entry point.

Runs the console front end over the in-memory calendar. A browser
front end consumes the same CalendarSurface render props.

Usage:
    Interactive:  python main.py
    Scenario:     python main.py --scenario full
"""

import logging

from clinic_scheduler.config import settings

logger = logging.getLogger(__name__)


def _run_console_mode() -> None:
    """Start the offline console demo."""
    from console_demo import main

    logger.debug("Starting console mode for '%s'", settings.clinic.name)
    main()


if __name__ == "__main__":
    _run_console_mode()
