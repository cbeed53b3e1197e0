from datetime import date, timedelta

import pytest

from officedesk.models.availability import OfficeAvailabilityConfig, TimeSlot, default_schedule
from officedesk.services.availability import (
    NoWorkingDayFound,
    ScheduleConfigError,
    available_slots,
    booked_times,
    is_open,
    is_valid_time,
    is_working_day,
    load_config,
    next_working_day,
    parse_date,
    weekday_index,
)

SUNDAY = date(2026, 10, 18)
MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
SATURDAY = date(2026, 10, 24)

MONDAY_ONLY = {"defaultSchedule": {"1": {"available": True, "slots": ["09:00", "10:00"]}}}

ALL_CLOSED = {"defaultSchedule": {str(d): {"available": False, "start": "09:00", "end": "17:00"} for d in range(7)}}


def starts(slots):
    return [s.start for s in slots]


def test_weekday_index_starts_on_sunday():
    assert weekday_index(SUNDAY) == 0
    assert weekday_index(MONDAY) == 1
    assert weekday_index(SATURDAY) == 6


def test_is_working_day_false_when_weekday_missing():
    assert is_working_day(MONDAY, MONDAY_ONLY) is True
    assert is_working_day(TUESDAY, MONDAY_ONLY) is False


def test_is_working_day_false_when_marked_unavailable():
    cfg = {"defaultSchedule": {"1": {"available": False, "slots": ["09:00"]}}}
    assert is_working_day(MONDAY, cfg) is False


def test_weekend_is_not_special_cased():
    """El sábado solo es laborable si la configuración lo dice; no hay regla fija de fin de semana."""
    cfg = {"defaultSchedule": {"6": {"available": True, "start": "09:00", "end": "12:00"}}}
    assert is_working_day(SATURDAY, cfg) is True
    assert is_working_day(SATURDAY, {"defaultSchedule": default_schedule()}) is False


def test_next_working_day_is_inclusive():
    assert next_working_day(MONDAY, MONDAY_ONLY) == MONDAY


def test_next_working_day_scans_forward():
    assert next_working_day(TUESDAY, MONDAY_ONLY) == MONDAY + timedelta(days=7)


def test_next_working_day_signals_exhaustion():
    """Sin ningún día disponible se agota la ventana de 14 días; nunca devuelve la fecha de entrada."""
    with pytest.raises(NoWorkingDayFound) as exc:
        next_working_day(MONDAY, ALL_CLOSED)
    assert exc.value.from_date == MONDAY
    assert exc.value.lookahead == 14


def test_next_working_day_respects_custom_lookahead():
    with pytest.raises(NoWorkingDayFound):
        next_working_day(TUESDAY, MONDAY_ONLY, lookahead=6)
    assert next_working_day(TUESDAY, MONDAY_ONLY, lookahead=7) == MONDAY + timedelta(days=7)


def test_next_working_day_without_config_is_exhausted():
    with pytest.raises(NoWorkingDayFound):
        next_working_day(MONDAY, None)


def test_next_working_day_skips_closed_dates():
    cfg = {**MONDAY_ONLY, "unavailableDates": [MONDAY.isoformat()]}
    assert next_working_day(MONDAY, cfg) == MONDAY + timedelta(days=7)


def test_booked_approved_slot_is_removed():
    existing = [{"time": "09:00", "status": "approved"}]
    assert starts(available_slots(MONDAY_ONLY, MONDAY, existing)) == ["10:00"]


def test_pending_appointment_blocks_slot():
    existing = [{"time": "10:00", "status": "pending"}]
    assert starts(available_slots(MONDAY_ONLY, MONDAY, existing)) == ["09:00"]


@pytest.mark.parametrize("status", ["cancelled", "rejected"])
def test_released_appointments_do_not_block(status):
    existing = [{"time": "09:00", "status": status}]
    assert starts(available_slots(MONDAY_ONLY, MONDAY, existing)) == ["09:00", "10:00"]


def test_appointments_without_time_do_not_block():
    existing = [{"time": None, "status": "approved"}]
    assert starts(available_slots(MONDAY_ONLY, MONDAY, existing)) == ["09:00", "10:00"]


def test_non_working_day_has_no_slots():
    assert available_slots(MONDAY_ONLY, TUESDAY, []) == []


def test_past_dates_have_no_slots():
    assert available_slots(MONDAY_ONLY, MONDAY, [], today=TUESDAY) == []
    assert starts(available_slots(MONDAY_ONLY, MONDAY, [], today=MONDAY)) == ["09:00", "10:00"]


def test_explicit_slots_are_sorted_and_deduplicated():
    cfg = {"defaultSchedule": {"1": {"available": True, "slots": ["11:00", "09:00", "11:00"]}}, "slotDuration": 45}
    slots = available_slots(cfg, MONDAY, [])
    assert slots == [TimeSlot("09:00", "09:45"), TimeSlot("11:00", "11:45")]


def test_range_with_granularity_only_keeps_whole_slots():
    cfg = {"defaultSchedule": {"1": {"available": True,
                                     "slots": {"start": "09:00", "end": "10:15", "granularityMinutes": 30}}}}
    assert available_slots(cfg, MONDAY, []) == [TimeSlot("09:00", "09:30"), TimeSlot("09:30", "10:00")]


def test_start_end_uses_office_slot_duration():
    cfg = {"defaultSchedule": {"1": {"available": True, "start": "09:00", "end": "12:00"}}, "slotDuration": 60}
    assert starts(available_slots(cfg, MONDAY, [])) == ["09:00", "10:00", "11:00"]


def test_default_schedule_expands_business_hours():
    cfg = OfficeAvailabilityConfig(default_schedule=default_schedule())
    slots = available_slots(cfg, MONDAY, [])
    assert slots[0] == TimeSlot("09:00", "09:30")
    assert slots[-1] == TimeSlot("16:30", "17:00")
    assert len(slots) == 16


def test_date_override_opens_a_closed_weekday():
    cfg = {**MONDAY_ONLY, "dateOverrides": {SATURDAY.isoformat(): {"available": True, "slots": ["08:00"]}}}
    assert is_working_day(SATURDAY, cfg) is False
    assert is_open(SATURDAY, cfg) is True
    assert starts(available_slots(cfg, SATURDAY, [])) == ["08:00"]


def test_unavailable_range_closes_every_day_inside():
    cfg = {**MONDAY_ONLY, "unavailableDateRanges": [
        {"start": SUNDAY.isoformat(), "end": MONDAY.isoformat(), "reason": "holiday"},
    ]}
    assert is_open(MONDAY, cfg) is False
    assert available_slots(cfg, MONDAY, []) == []
    assert is_open(MONDAY + timedelta(days=7), cfg) is True


@pytest.mark.parametrize("raw", [None, {}, {"officeId": "o1"}, {"defaultSchedule": None}, "not a mapping"])
def test_missing_schedule_means_no_availability(raw):
    assert available_slots(raw, MONDAY, []) == []
    assert load_config(raw).default_schedule == {}


@pytest.mark.parametrize("raw", [
    {"defaultSchedule": {"1": {"available": True, "slots": ["9am"]}}},
    {"defaultSchedule": {"7": {"available": True, "slots": ["09:00"]}}},
    {"defaultSchedule": {"1": {"available": True, "start": "12:00", "end": "09:00"}}},
    {"defaultSchedule": {"1": {"available": True, "start": "09:00"}}},
    {"defaultSchedule": {"1": {"available": True,
                               "slots": {"start": "09:00", "end": "10:00", "granularityMinutes": 0}}}},
    {"defaultSchedule": {}, "slotDuration": -5},
])
def test_malformed_config_raises(raw):
    with pytest.raises(ScheduleConfigError):
        load_config(raw)


def test_snake_case_keys_are_accepted():
    cfg = load_config({"default_schedule": {1: {"available": True, "slots": ["09:00"]}}, "slot_duration": 15})
    assert cfg.slot_duration == 15
    assert starts(available_slots(cfg, MONDAY, [])) == ["09:00"]


def test_unknown_appointment_status_fails_fast():
    with pytest.raises(ValueError):
        booked_times([{"time": "09:00", "status": "done"}])


def test_engine_is_deterministic():
    existing = [{"time": "09:00", "status": "pending"}]
    assert available_slots(MONDAY_ONLY, MONDAY, existing) == available_slots(MONDAY_ONLY, MONDAY, existing)


def test_time_and_date_helpers():
    assert is_valid_time("09:30")
    assert not is_valid_time("24:00")
    assert not is_valid_time("9:30")
    assert parse_date("2026-10-19") == MONDAY
    with pytest.raises(ValueError):
        parse_date("19/10/2026")
