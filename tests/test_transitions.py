"""
Tests for transition metrics between consecutive trace entries.
"""
import math

import pytest

from src.pad_engine.models import CostBreakdown, DebugEvent, Difficulty, Finger, Hand, NoteEvent, unplayable_event
from src.pad_engine.transitions import (
    analyze_transition,
    analyze_transitions,
    is_finger_change,
    is_hand_switch,
    speed_pressure,
    stretch_score,
)


def note(hand, finger, time, row, col, stretch=0.0):
    return DebugEvent(
        pitch=36, start_time=time, hand=hand, finger=finger, cost=1.0,
        difficulty=Difficulty.EASY, row=row, col=col,
        breakdown=CostBreakdown(stretch=stretch),
    )


class TestFlags:
    def test_hand_switch(self):
        a = note(Hand.LEFT, Finger.THUMB, 0.0, 0, 0)
        b = note(Hand.RIGHT, Finger.THUMB, 0.1, 0, 4)
        assert is_hand_switch(a, b) is True
        assert is_finger_change(a, b) is False

    def test_finger_change(self):
        a = note(Hand.RIGHT, Finger.THUMB, 0.0, 0, 0)
        b = note(Hand.RIGHT, Finger.INDEX, 0.1, 0, 1)
        assert is_hand_switch(a, b) is False
        assert is_finger_change(a, b) is True

    def test_unplayable_never_switches(self):
        a = note(Hand.RIGHT, Finger.THUMB, 0.0, 0, 0)
        b = unplayable_event(NoteEvent(36, 0.1), 1)
        assert is_hand_switch(a, b) is False
        assert is_finger_change(a, b) is False


class TestSpeedPressure:
    def test_simultaneous_is_maximal(self):
        assert speed_pressure(1.0, 0.0) == 1.0

    def test_unplaced_is_maximal(self):
        assert speed_pressure(math.inf, 100.0) == 1.0

    def test_slow_small_move_is_low(self):
        assert speed_pressure(1.0, 999.0) == pytest.approx(math.tanh(0.01))


class TestStretchScore:
    def test_scaled_and_capped(self):
        assert stretch_score(note(Hand.LEFT, Finger.THUMB, 0.0, 0, 0, stretch=2.5)) == pytest.approx(0.25)
        assert stretch_score(note(Hand.LEFT, Finger.THUMB, 0.0, 0, 0, stretch=50.0)) == 1.0

    def test_unplayable_is_maximal(self):
        assert stretch_score(unplayable_event(NoteEvent(36, 0.0), 0)) == 1.0


class TestAnalyzeTransition:
    """Composite difficulty stays in 0..1."""

    def test_fields(self):
        a = note(Hand.LEFT, Finger.THUMB, 0.0, 0, 0)
        b = note(Hand.RIGHT, Finger.THUMB, 0.5, 0, 3)
        t = analyze_transition(a, b, 0, 1)
        assert t.time_delta_ms == pytest.approx(500.0)
        assert t.grid_distance == pytest.approx(3.0)
        assert t.hand_switch is True
        assert 0.0 <= t.composite_difficulty <= 1.0

    def test_unplaced_distance(self):
        a = note(Hand.LEFT, Finger.THUMB, 0.0, 0, 0)
        b = unplayable_event(NoteEvent(20, 0.5), 1)
        t = analyze_transition(a, b)
        assert math.isinf(t.grid_distance)
        assert t.composite_difficulty == 1.0

    def test_one_per_adjacent_pair(self):
        events = [note(Hand.LEFT, Finger.THUMB, i * 0.1, 0, i) for i in range(4)]
        transitions = analyze_transitions(events)
        assert [(t.from_index, t.to_index) for t in transitions] == [(0, 1), (1, 2), (2, 3)]
        assert analyze_transitions(events[:1]) == []
