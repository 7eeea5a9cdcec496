#!/usr/bin/env python3
"""Tests for the stored record classes."""
from datetime import datetime

import pytest
from motolog import (
    Bike,
    EngineCc,
    FuelLog,
    ManualReminder,
    ReminderType,
    ServicePart,
    ServiceRecord,
    ServiceType,
    TankStatus,
    Trip,
    TripExpense,
    TripStatus,
)


class TestBike:
    """Tests for Bike class."""

    def test_display_name(self):
        bike = Bike("Red Pulsar", "Bajaj", "Pulsar 220F", 2021, "126-250")
        assert bike.display_name == "Red Pulsar (2021 Bajaj Pulsar 220F)"

    def test_display_name_without_nickname(self):
        bike = Bike("", "Honda", "Shine", 2019, EngineCc.CC_50_125)
        assert bike.display_name == "2019 Honda Shine"

    def test_engine_class_is_coerced(self):
        bike = Bike("", "Royal Enfield", "Himalayan", 2022, "251-500")
        assert bike.engine_cc == EngineCc.CC_251_500

    def test_unknown_engine_class(self):
        with pytest.raises(ValueError):
            Bike("", "Honda", "Shine", 2019, "125")


class TestFuelLog:
    """Tests for FuelLog class."""

    def test_real_fill(self):
        log = FuelLog("f1", "2026-06-02", 10020, 12.5, 2150)
        assert log.is_real
        assert log.tank_status == TankStatus.FULL

    def test_odometer_marker(self):
        marker = FuelLog.odometer_marker("m1", "2026-06-10", 10300, notes="Trip start")
        assert not marker.is_real
        assert marker.liters == 0
        assert marker.amount == 0
        assert marker.tank_status == TankStatus.PARTIAL
        assert marker.odometer == 10300

    def test_tank_status_from_string(self):
        log = FuelLog("f1", "2026-06-02", 10020, 3, 516, tank_status="partial")
        assert log.tank_status == TankStatus.PARTIAL

    def test_none_amounts_become_zero(self):
        log = FuelLog("f1", "2026-06-02", 10020, liters=None, amount=None)
        assert log.liters == 0
        assert not log.is_real


class TestServiceRecord:
    """Tests for ServiceRecord and ServicePart."""

    def test_total_cost_is_labor_plus_parts(self):
        record = ServiceRecord("s1", "2026-06-05", 10100, "General Service", labor_cost=500,
                               parts=[ServicePart("Engine Oil", 950, 1),
                                      ServicePart("Spark Plug", 150, 2)])
        assert record.parts_cost == 1250
        assert record.total_cost == 1750

    def test_no_parts(self):
        record = ServiceRecord("s1", "2026-06-05", 10100, "Washing", labor_cost=200)
        assert record.total_cost == 200

    def test_service_type(self):
        record = ServiceRecord("s1", "2026-06-05", 10100, "Puncture", service_type="emergency")
        assert record.service_type == ServiceType.EMERGENCY
        assert ServiceRecord("s2", "2026-06-05", 10100, "x").service_type is None

    @pytest.mark.parametrize("reminder_type,value,expected", [
        (ReminderType.KM, 3000, True),
        (ReminderType.DAYS, 180, True),
        (ReminderType.NONE, 3000, False),
        (ReminderType.KM, None, False),
        (ReminderType.KM, 0, False),
        (ReminderType.DAYS, -5, False),
    ])
    def test_has_reminder(self, reminder_type, value, expected):
        part = ServicePart("Engine Oil", 950, 1, reminder_type, value)
        assert part.has_reminder is expected

    def test_part_line_cost(self):
        assert ServicePart("Spark Plug", 150, 2).line_cost == 300


class TestManualReminder:
    """Tests for ManualReminder class."""

    def test_name_from_notes(self):
        assert ManualReminder("r1", due_date="2026-12-15", notes="PUC").name == "PUC"

    def test_default_name(self):
        assert ManualReminder("r1", due_odometer=13000).name == "General Service"


class TestTrip:
    """Tests for Trip class."""

    @pytest.fixture
    def trip(self):
        return Trip(
            "t1", "Pokhara", "2026-09-10T06:30:00", 400,
            end="2026-09-13T18:00:00",
            start_odometer=11520,
            end_odometer=11890,
            status="completed",
            expenses=[TripExpense("e1", "Fuel", 2408), TripExpense("e2", "Lodge", 3500)],
        )

    def test_status_coerced(self, trip):
        assert trip.status == TripStatus.COMPLETED

    def test_total_expenses(self, trip):
        assert trip.total_expenses == 5908

    def test_distance_traveled(self, trip):
        assert trip.distance_traveled == 370

    def test_distance_needs_both_odometers(self):
        trip = Trip("t1", "Pokhara", "2026-09-10", 400, start_odometer=11520)
        assert trip.distance_traveled == 0

    def test_duration_days(self, trip):
        assert trip.duration_days() == 3

    def test_same_day_trip_is_one_day(self):
        trip = Trip("t1", "Nagarkot", "2026-09-10T06:00:00", 60, end="2026-09-10T19:00:00")
        assert trip.duration_days() == 1

    def test_unfinished_trip_uses_now(self):
        trip = Trip("t1", "Mustang", "2026-10-05", 450, status=TripStatus.ACTIVE)
        assert trip.duration_days(now=datetime(2026, 10, 8, 12, 0)) == 3

    def test_mixed_timezones(self):
        trip = Trip("t1", "Mustang", "2026-10-05T06:00:00+05:45", 450)
        assert trip.duration_days(now=datetime(2026, 10, 7)) == 2

    def test_end_before_start_is_one_day(self):
        trip = Trip("t1", "Mustang", "2026-10-05", 450, end="2026-10-01")
        assert trip.duration_days() == 1
