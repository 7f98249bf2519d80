"""Tests for the shared device pool availability check."""

from datetime import datetime, timedelta

import pytest

from clinic_scheduler.tools.appointment_types import (
    AppointmentType,
    AppointmentTypeRegistry,
    UnknownAppointmentTypeError,
)
from clinic_scheduler.tools.availability import (
    check_device_availability,
    count_available_devices,
    occupancy_end,
)
from tests.conftest import BASE_TIME, make_appointment


class TestUnconstrainedTypes:
    def test_ecg_always_available(self, registry):
        existing = [
            make_appointment("holter24", BASE_TIME),
            make_appointment("holter48", BASE_TIME + timedelta(hours=1)),
            make_appointment("ecg", BASE_TIME),
        ]
        result = check_device_availability(
            existing, registry.get("ecg"), BASE_TIME + timedelta(hours=2), total_devices=2
        )
        assert result.available
        assert result.in_use_count == 0
        assert result.remaining_devices == 0
        assert result.next_available_date is None
        assert result.restriction_end is None
        assert result.conflicting_appointments == []

    def test_holter_pressorio_has_no_device_group(self, registry):
        result = check_device_availability(
            [make_appointment("holterPress", BASE_TIME)],
            registry.get("holterPress"),
            BASE_TIME,
        )
        assert result.available
        assert result.remaining_devices == 0

    def test_empty_calendar_constrained_type(self, registry):
        result = check_device_availability([], registry.get("holter24"), BASE_TIME, total_devices=2)
        assert result.available
        assert result.in_use_count == 0
        assert result.remaining_devices == 2
        assert result.restriction_end is None


class TestCrossTypeContention:
    def test_holter24_then_holter48_leaves_one_device(self, registry):
        existing = [make_appointment("holter24", datetime(2024, 1, 1, 9, 0))]
        result = check_device_availability(
            existing, registry.get("holter48"), datetime(2024, 1, 1, 10, 0), total_devices=2
        )
        assert result.available
        assert result.in_use_count == 1
        assert result.remaining_devices == 1
        assert result.next_available_date is None
        assert result.restriction_end == datetime(2024, 1, 2, 11, 0)

    def test_third_overlapping_booking_exhausts_pool(self, registry):
        existing = [
            make_appointment("holter24", datetime(2024, 1, 1, 9, 0)),
            make_appointment("holter48", datetime(2024, 1, 1, 10, 0)),
        ]
        result = check_device_availability(
            existing, registry.get("holter72"), datetime(2024, 1, 1, 11, 0), total_devices=2
        )
        assert not result.available
        assert result.in_use_count == 2
        assert result.remaining_devices == 0
        assert result.next_available_date == datetime(2024, 1, 2, 11, 0)
        assert result.restriction_end == datetime(2024, 1, 3, 12, 0)

    def test_next_available_is_earliest_release(self, registry):
        # holter72 booked first but releases last
        existing = [
            make_appointment("holter72", datetime(2024, 1, 1, 8, 0)),
            make_appointment("holter24", datetime(2024, 1, 1, 9, 0)),
        ]
        result = check_device_availability(
            existing, registry.get("holter24"), datetime(2024, 1, 1, 12, 0), total_devices=2
        )
        assert result.next_available_date == datetime(2024, 1, 2, 11, 0)
        assert result.restriction_end == datetime(2024, 1, 4, 10, 0)
        assert [a.appointment_type for a in result.conflicting_appointments] == [
            "holter24", "holter72",
        ]

    def test_unconstrained_bookings_do_not_use_devices(self, registry):
        existing = [
            make_appointment("ecg", BASE_TIME),
            make_appointment("holterPress", BASE_TIME),
        ]
        result = check_device_availability(
            existing, registry.get("holter24"), BASE_TIME, total_devices=2
        )
        assert result.in_use_count == 0
        assert result.remaining_devices == 2

    def test_overbooked_pool_reports_negative_remaining(self, registry):
        existing = [make_appointment("holter24", BASE_TIME) for _ in range(3)]
        result = check_device_availability(
            existing, registry.get("holter24"), BASE_TIME, total_devices=2
        )
        assert not result.available
        assert result.remaining_devices == -1


class TestOccupancyBoundaries:
    def test_start_at_release_instant_conflicts(self, registry):
        existing = [make_appointment("holter24", BASE_TIME)]
        release = BASE_TIME + timedelta(hours=26)
        result = check_device_availability(
            existing, registry.get("holter24"), release, total_devices=1
        )
        assert result.in_use_count == 1
        assert not result.available
        assert result.next_available_date == release

    def test_start_one_minute_after_release_is_free(self, registry):
        existing = [make_appointment("holter24", BASE_TIME)]
        result = check_device_availability(
            existing,
            registry.get("holter24"),
            BASE_TIME + timedelta(hours=26, minutes=1),
            total_devices=1,
        )
        assert result.in_use_count == 0
        assert result.available

    def test_start_one_microsecond_after_release_is_free(self, registry):
        existing = [make_appointment("holter24", BASE_TIME)]
        result = check_device_availability(
            existing,
            registry.get("holter24"),
            BASE_TIME + timedelta(hours=26, microseconds=1),
            total_devices=1,
        )
        assert result.in_use_count == 0

    def test_start_equal_to_existing_start_conflicts(self, registry):
        existing = [make_appointment("holter48", BASE_TIME)]
        result = check_device_availability(
            existing, registry.get("holter24"), BASE_TIME, total_devices=2
        )
        assert result.in_use_count == 1

    def test_booking_before_existing_start_is_free(self, registry):
        existing = [make_appointment("holter24", BASE_TIME)]
        result = check_device_availability(
            existing, registry.get("holter24"), BASE_TIME - timedelta(minutes=1), total_devices=1
        )
        assert result.available
        assert result.in_use_count == 0

    def test_window_uses_restriction_hours_not_calendar_block(self, registry):
        existing = [make_appointment("holter24", BASE_TIME, duration=30)]
        result = check_device_availability(
            existing, registry.get("holter24"), BASE_TIME + timedelta(hours=5), total_devices=2
        )
        assert result.in_use_count == 1


class TestPurity:
    def test_identical_inputs_give_identical_output(self, registry):
        existing = [
            make_appointment("holter24", datetime(2024, 1, 1, 9, 0)),
            make_appointment("holter48", datetime(2024, 1, 1, 10, 0)),
        ]
        first = check_device_availability(
            existing, registry.get("holter72"), datetime(2024, 1, 1, 11, 0), total_devices=2
        )
        second = check_device_availability(
            existing, registry.get("holter72"), datetime(2024, 1, 1, 11, 0), total_devices=2
        )
        assert first == second

    def test_inputs_not_mutated(self, registry):
        existing = [
            make_appointment("holter72", datetime(2024, 1, 1, 8, 0)),
            make_appointment("holter24", datetime(2024, 1, 1, 9, 0)),
        ]
        snapshot = [apt.model_copy(deep=True) for apt in existing]
        check_device_availability(
            existing, registry.get("holter24"), datetime(2024, 1, 1, 12, 0), total_devices=2
        )
        assert existing == snapshot

    def test_pool_size_defaults_to_settings(self, registry):
        from clinic_scheduler.config import settings

        result = check_device_availability([], registry.get("holter24"), BASE_TIME)
        assert result.remaining_devices == settings.devices.total_holter_devices


class TestRegistryLookups:
    def test_unknown_type_in_collection_fails_fast(self, registry):
        existing = [make_appointment("mystery", BASE_TIME)]
        with pytest.raises(UnknownAppointmentTypeError):
            check_device_availability(existing, registry.get("holter24"), BASE_TIME)

    def test_custom_registry_with_separate_group(self):
        custom = AppointmentTypeRegistry([
            AppointmentType("a", "A", 30, "#fff", device_group="g1", restriction_hours=2),
            AppointmentType("b", "B", 30, "#fff", device_group="g2", restriction_hours=2),
        ])
        existing = [make_appointment("a", BASE_TIME)]
        result = check_device_availability(
            existing, custom.get("b"), BASE_TIME, registry=custom, total_devices=1
        )
        assert result.available
        assert result.in_use_count == 0


class TestHelpers:
    def test_occupancy_end_constrained(self, registry):
        apt = make_appointment("holter48", BASE_TIME)
        assert occupancy_end(apt, registry) == BASE_TIME + timedelta(hours=50)

    def test_occupancy_end_unconstrained(self, registry):
        assert occupancy_end(make_appointment("ecg", BASE_TIME), registry) is None

    def test_count_available_devices(self, registry):
        existing = [make_appointment("holter24", BASE_TIME)]
        assert count_available_devices(
            existing, registry.get("holter72"), BASE_TIME, total_devices=2
        ) == 1
