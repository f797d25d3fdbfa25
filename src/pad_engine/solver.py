"""Solver — section-aware greedy hand/finger assignment with one-step lookahead.

For each note event, in time order:
    1. Find the section whose measure range covers the event.
    2. Map the pitch to a pad with that section's pitch mapping.
    3. Enumerate feasible ``(hand, finger)`` candidates, preferred hand first
       (columns 0–3 prefer the left hand, 4–7 the right).
    4. Score each with the cost model plus a lookahead term that simulates
       the candidate and checks how the same hand copes with the next note.
    5. Commit the cheapest candidate to the hand state and trace it.

Design choices:
    - Greedy and deterministic; ties go to the earlier candidate.
    - A hand with nothing on the grid reaches and moves out from its home
      pad in the active section.
    - Every failure (no section, off-grid pitch, no feasible finger) becomes
      an ``Unplayable`` trace entry rather than an exception.
    - Hand states and bounce history belong to the solver instance and are
      reset at the start of every :meth:`SectionAwareSolver.solve` call.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Mapping

from .constants import EngineConstants, load_constants
from .cost_model import BounceHistory, evaluate
from .feasibility import feasible_fingers
from .grid_mapper import grid_distance, note_to_grid
from .hand_state import apply_strike, clone, new_hand_state
from .models import (
    HANDS,
    Candidate,
    CostBreakdown,
    DebugEvent,
    EngineResult,
    FingerOverride,
    GridPos,
    Hand,
    HandState,
    NoteEvent,
    Performance,
    SectionMap,
    unplayable_event,
)
from .result import build_result, difficulty_for_cost

logger = logging.getLogger(__name__)

# Columns below this split prefer the left hand.
HAND_SPLIT_COL: int = 4


@dataclass(frozen=True)
class _Target:
    """A note resolved to its section and pad."""

    event: NoteEvent
    section: SectionMap
    pos: tuple[int, int]


class SectionAwareSolver:
    """Assigns every note of a performance to a hand and finger.

    Args:
        section_maps: Measure range → pitch mapping bindings; the first
            section covering a measure wins.
        constants: Engine constants. Loaded from *config_path* when omitted.
        config_path: YAML file used when *constants* is not given.

    Raises:
        ValueError: If *section_maps* contains something other than
            :class:`SectionMap` instances.
    """

    def __init__(
        self,
        section_maps: Iterable[SectionMap],
        constants: EngineConstants | None = None,
        config_path: str | Path | None = None,
    ) -> None:
        self.section_maps: list[SectionMap] = list(section_maps)
        for section in self.section_maps:
            if not isinstance(section, SectionMap):
                raise ValueError(f"Expected SectionMap, got {type(section).__name__}")

        self.constants = constants if constants is not None else load_constants(config_path)
        self._hands: dict[Hand, HandState] = {}
        self._history = BounceHistory(self.constants.bounce_history_size)
        self.reset()

    # ── State ─────────────────────────────────────────────────

    def reset(self) -> None:
        """Return both hands to neutral and forget all previous strikes."""
        self._hands = {hand: new_hand_state() for hand in HANDS}
        self._history.clear()

    @property
    def hands(self) -> dict[Hand, HandState]:
        """Copies of the current hand states."""
        return {hand: clone(state) for hand, state in self._hands.items()}

    # ── Lookups ───────────────────────────────────────────────

    def seconds_per_measure(self, tempo: float) -> float:
        return 60.0 / tempo * self.constants.beats_per_measure

    def section_for_time(self, time: float, tempo: float) -> SectionMap | None:
        """First section whose measure range contains *time*, or ``None``."""
        measure = math.floor(time / self.seconds_per_measure(tempo)) + 1
        for section in self.section_maps:
            if section.covers(measure):
                return section
        return None

    def home_position(self, hand: Hand, section: SectionMap) -> GridPos:
        if section.home_positions and hand in section.home_positions:
            return section.home_positions[hand]
        return self.constants.home_positions[hand]

    def _locate(self, event: NoteEvent, tempo: float) -> _Target | None:
        section = self.section_for_time(event.start_time, tempo)
        if section is None:
            return None
        pos = note_to_grid(event.pitch, section.pitch_mapping)
        if pos is None:
            return None
        return _Target(event, section, pos)

    # ── Public API ────────────────────────────────────────────

    def solve(
        self,
        performance: Performance,
        overrides: Mapping[int, FingerOverride] | None = None,
    ) -> EngineResult:
        """Assign every event of *performance* and summarise the outcome.

        Args:
            performance: Events to analyse; sorted by start time here
                (stable, so equal times keep their input order).
            overrides: Forced choices keyed by index into
                ``performance.events``. Forced events are costed but not searched.

        Returns:
            The engine result; ``debug_events`` follow time order.

        Raises:
            ValueError: On a non-positive tempo or a malformed override.
        """
        self.reset()

        tempo = performance.tempo if performance.tempo is not None else self.constants.default_tempo
        if tempo <= 0:
            raise ValueError(f"Tempo must be positive, got {tempo}")

        events = performance.events
        overrides = _validate_overrides(overrides or {}, len(events))
        order = sorted(range(len(events)), key=lambda i: events[i].start_time)
        targets = [self._locate(events[i], tempo) for i in order]

        debug_events: list[DebugEvent] = []
        drifts: list[float] = []
        last_time: float | None = None

        for step, index in enumerate(order):
            event = events[index]
            target = targets[step]
            if target is None:
                logger.debug("Event %d (pitch %d) is unmapped", index, event.pitch)
                debug_events.append(unplayable_event(event, index))
                continue

            elapsed = 0.0 if last_time is None else event.start_time - last_time
            upcoming = targets[step + 1] if step + 1 < len(targets) else None

            if index in overrides:
                forced = overrides[index]
                candidate = Candidate(
                    forced.hand,
                    forced.finger,
                    self._evaluate(self._hands[forced.hand], forced, target),
                )
            else:
                candidate = self._best_candidate(target, upcoming, elapsed)

            if candidate is None:
                logger.debug("Event %d (pitch %d) has no feasible finger", index, event.pitch)
                debug_events.append(unplayable_event(event, index, *target.pos))
                continue

            debug_event = self._commit(candidate, target, index, elapsed)
            debug_events.append(debug_event)
            if debug_event.is_playable:
                home = self.home_position(candidate.hand, target.section)
                drifts.append(grid_distance(home, target.pos))
            last_time = event.start_time

        result = build_result(debug_events, self._hands, drifts)
        logger.info(
            "Solved %d events: score=%.1f hard=%d unplayable=%d",
            len(events),
            result.score,
            result.hard_count,
            result.unplayable_count,
        )
        return result

    # ── Candidate search ──────────────────────────────────────

    def candidate_hands(self, pos: tuple[int, int]) -> list[Hand]:
        """Both hands, the one on the pad's side of the split first."""
        preferred = Hand.LEFT if pos[1] < HAND_SPLIT_COL else Hand.RIGHT
        return [preferred, preferred.other]

    def _evaluate(
        self,
        state: HandState,
        choice: FingerOverride,
        target: _Target,
        history: BounceHistory | None = None,
    ) -> CostBreakdown:
        return evaluate(
            state,
            choice.hand,
            choice.finger,
            target.pos,
            target.event.pitch,
            target.event.start_time,
            history if history is not None else self._history,
            self.home_position(choice.hand, target.section),
            self.constants,
        )

    def _best_candidate(
        self,
        target: _Target,
        upcoming: _Target | None,
        elapsed: float,
    ) -> Candidate | None:
        best: Candidate | None = None
        for hand in self.candidate_hands(target.pos):
            state = self._hands[hand]
            home = self.home_position(hand, target.section)
            for finger in feasible_fingers(state, hand, target.pos, self.constants, home):
                choice = FingerOverride(hand, finger)
                breakdown = self._evaluate(state, choice, target)
                breakdown = replace(
                    breakdown,
                    lookahead=self._lookahead(state, choice, target, upcoming, elapsed),
                )
                if best is None or breakdown.selection_cost < best.breakdown.selection_cost:
                    best = Candidate(hand, finger, breakdown)
        return best

    def _lookahead(
        self,
        state: HandState,
        choice: FingerOverride,
        target: _Target,
        upcoming: _Target | None,
        elapsed: float,
    ) -> float:
        """Extra cost for leaving *choice.hand* badly placed for the next note."""
        if upcoming is None:
            return 0.0

        simulated = apply_strike(clone(state), choice.finger, target.pos, elapsed, self.constants)
        history = self._history.copy()
        history.record(target.event.pitch, choice.hand, choice.finger, target.event.start_time)

        fingers = feasible_fingers(
            simulated,
            choice.hand,
            upcoming.pos,
            self.constants,
            self.home_position(choice.hand, upcoming.section),
        )
        if not fingers:
            return self.constants.lookahead_infeasible_penalty

        next_cost = min(
            self._evaluate(simulated, FingerOverride(choice.hand, f), upcoming, history).total
            for f in fingers
        )
        if next_cost > self.constants.lookahead_expensive_threshold:
            return self.constants.lookahead_weight * next_cost
        return 0.0

    # ── Commit ────────────────────────────────────────────────

    def _commit(
        self,
        candidate: Candidate,
        target: _Target,
        index: int,
        elapsed: float,
    ) -> DebugEvent:
        """Apply *candidate* to the real hand state and build its trace entry."""
        event = target.event
        apply_strike(self._hands[candidate.hand], candidate.finger, target.pos, elapsed, self.constants)
        self._history.record(event.pitch, candidate.hand, candidate.finger, event.start_time)

        cost = candidate.base_cost
        difficulty = difficulty_for_cost(cost, self.constants)
        logger.debug(
            "Event %d pitch %d -> %s %s at %s cost=%.2f lookahead=%.2f (%s)",
            index,
            event.pitch,
            candidate.hand.value,
            candidate.finger.value,
            target.pos,
            cost,
            candidate.lookahead_cost,
            difficulty.value,
        )
        return DebugEvent(
            pitch=event.pitch,
            start_time=event.start_time,
            hand=candidate.hand,
            finger=candidate.finger,
            cost=cost,
            difficulty=difficulty,
            row=target.pos[0],
            col=target.pos[1],
            event_index=index,
            breakdown=candidate.breakdown,
        )


def _validate_overrides(
    overrides: Mapping[int, FingerOverride],
    event_count: int,
) -> dict[int, FingerOverride]:
    checked: dict[int, FingerOverride] = {}
    for index, forced in overrides.items():
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValueError(f"Override keys must be event indices, got {index!r}")
        if not 0 <= index < event_count:
            raise ValueError(f"Override index {index} outside 0..{event_count - 1}")
        if not isinstance(forced, FingerOverride):
            raise ValueError(f"Override for event {index} must be a FingerOverride")
        checked[index] = forced
    return checked


def solve(
    performance: Performance,
    section_maps: Iterable[SectionMap],
    overrides: Mapping[int, FingerOverride] | None = None,
    constants: EngineConstants | None = None,
) -> EngineResult:
    """Convenience wrapper: fresh solver → one :meth:`SectionAwareSolver.solve`."""
    return SectionAwareSolver(section_maps, constants=constants).solve(performance, overrides)
