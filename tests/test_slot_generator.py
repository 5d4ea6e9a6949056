from __future__ import annotations

import pytest

from booking_engine.application.exceptions import NotFound, ValidationError
from booking_engine.application.use_cases.slot_generator import candidate_starts, generate_slots
from booking_engine.domain.entities.schedule import Window

from tests.conftest import CUSTOMER, MONDAY, SUNDAY, new_booking


def _always_free(start: int, duration: int) -> bool:
    return True


def _labels(slots) -> list[str]:
    return [str(s) for s in slots]


def test_grid_covers_window():
    slots = generate_slots(Window(540, 660), 30, _always_free)
    assert _labels(slots) == ["09:00", "09:30", "10:00", "10:30"]


def test_duration_must_fit_before_close():
    slots = generate_slots(Window(540, 660), 45, _always_free)
    assert _labels(slots) == ["09:00", "09:30", "10:00"]


def test_duration_longer_than_window_yields_nothing():
    assert generate_slots(Window(540, 570), 60, _always_free) == []


def test_closed_day_yields_nothing():
    assert generate_slots(None, 30, _always_free) == []


def test_busy_predicate_filters():
    busy = {600}
    slots = generate_slots(Window(540, 660), 30, lambda start, duration: start not in busy)
    assert "10:00" not in _labels(slots)


@pytest.mark.parametrize("duration,step", [(0, 30), (-5, 30), (30, 0)])
def test_non_positive_values_rejected(duration, step):
    with pytest.raises(ValidationError):
        list(candidate_starts(Window(540, 660), duration, step))


def test_every_slot_lies_inside_window():
    window = Window(9 * 60 + 15, 12 * 60)
    for duration in (20, 30, 45, 60):
        for slot in generate_slots(window, duration, _always_free):
            assert slot.minute_of_day >= window.start_minute
            assert slot.minute_of_day + duration <= window.end_minute


class TestAvailabilityUseCase:
    def test_public_grid_for_barber(self, availability):
        slots = _labels(availability.available_slots("barber-marco", MONDAY))
        assert slots[0] == "09:00"
        assert slots[-1] == "16:30"
        assert len(slots) == 16

    def test_closed_day(self, availability):
        assert availability.available_slots("barber-marco", SUNDAY) == []

    def test_booked_slot_disappears(self, availability, machine):
        machine.create(CUSTOMER, new_booking(time="10:00"))
        slots = _labels(availability.available_slots("barber-marco", MONDAY))
        assert "10:00" not in slots
        assert "09:30" in slots
        assert "10:30" in slots

    def test_service_duration_widens_conflict(self, availability, machine):
        machine.create(CUSTOMER, new_booking(time="10:00"))
        slots = _labels(availability.available_slots("barber-marco", MONDAY, "svc-fade"))
        # A 45 minute fade starting 09:30 would run into the 10:00 booking.
        assert "09:30" not in slots
        assert "09:00" in slots
        assert "16:30" not in slots

    def test_unknown_service(self, availability):
        with pytest.raises(NotFound):
            availability.available_slots("barber-marco", MONDAY, "svc-nope")

    def test_unknown_provider(self, availability):
        with pytest.raises(NotFound):
            availability.available_slots("nobody", MONDAY)
