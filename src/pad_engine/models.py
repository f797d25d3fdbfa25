"""Models — value types shared by every stage of the pad engine.

Inputs supplied by the caller (:class:`NoteEvent`, :class:`Performance`,
:class:`PitchMapping`, :class:`SectionMap`, :class:`FingerOverride`), the
solver's mutable per-hand records (:class:`FingerState`, :class:`HandState`)
and the output contract (:class:`DebugEvent`, :class:`EngineResult`).

Grid positions are plain ``(row, col)`` tuples. Row 0 is the bottom row,
column 0 the leftmost column.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


# ── Grid geometry ─────────────────────────────────────────────
GRID_ROWS: int = 8
GRID_COLS: int = 8

# ``(row, col)``; derived positions (centre of gravity) may be fractional.
GridPos = tuple[float, float]


class Finger(Enum):
    """The five fingers, declared in anatomical order thumb → pinky."""

    THUMB = "thumb"
    INDEX = "index"
    MIDDLE = "middle"
    RING = "ring"
    PINKY = "pinky"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Hand(Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def prefix(self) -> str:
        return "L" if self is Hand.LEFT else "R"

    @property
    def other(self) -> Hand:
        return Hand.RIGHT if self is Hand.LEFT else Hand.LEFT


class Difficulty(Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    UNPLAYABLE = "Unplayable"


FINGERS: list[Finger] = list(Finger)
HANDS: list[Hand] = [Hand.LEFT, Hand.RIGHT]

# Stand-in for the hand of a note that could not be assigned.
UNPLAYABLE: str = "Unplayable"


def finger_key(hand: Hand, finger: Finger) -> str:
    """Key used by the usage and fatigue maps, e.g. ``"L-Thumb"``."""
    return f"{hand.prefix}-{finger.label}"


# ── Caller inputs ─────────────────────────────────────────────

@dataclass(frozen=True)
class NoteEvent:
    """A single pitch triggered at an absolute time in seconds."""

    pitch: int
    start_time: float

    def __post_init__(self) -> None:
        if not 0 <= self.pitch <= 127:
            raise ValueError(f"Pitch must be within 0-127, got {self.pitch}")


@dataclass(frozen=True)
class Performance:
    """The note events to analyse plus the tempo used to locate measures.

    ``tempo`` of ``None`` means "use the configured default tempo".
    """

    events: tuple[NoteEvent, ...]
    tempo: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "events", tuple(self.events))


@dataclass(frozen=True)
class PitchMapping:
    """Linear pitch → pad layout anchored at the bottom-left pad."""

    origin_pitch: int
    rows: int = GRID_ROWS
    cols: int = GRID_COLS

    def __post_init__(self) -> None:
        if self.rows != GRID_ROWS or self.cols != GRID_COLS:
            raise ValueError(
                f"Pitch mapping must be {GRID_ROWS}x{GRID_COLS}, "
                f"got {self.rows}x{self.cols}"
            )


@dataclass(frozen=True)
class SectionMap:
    """Binds a pitch mapping to an inclusive range of 1-based measures.

    ``home_positions`` optionally replaces the configured per-hand home pads
    while this section is active.
    """

    start_measure: int
    length_in_measures: int
    pitch_mapping: PitchMapping
    home_positions: dict[Hand, GridPos] | None = None

    def __post_init__(self) -> None:
        if self.start_measure < 1:
            raise ValueError(
                f"Section start_measure must be >= 1, got {self.start_measure}"
            )
        if self.length_in_measures < 1:
            raise ValueError(
                "Section length_in_measures must be >= 1, "
                f"got {self.length_in_measures}"
            )

    @property
    def end_measure(self) -> int:
        """Last measure (inclusive) covered by this section."""
        return self.start_measure + self.length_in_measures - 1

    def covers(self, measure: int) -> bool:
        return self.start_measure <= measure <= self.end_measure


@dataclass(frozen=True)
class FingerOverride:
    """A caller-forced (hand, finger) choice for one event index."""

    hand: Hand
    finger: Finger


# ── Hand state ────────────────────────────────────────────────

@dataclass
class FingerState:
    current_pos: GridPos | None = None
    fatigue: float = 0.0


@dataclass
class HandState:
    """One hand's five fingers plus the values derived from them.

    ``center_of_gravity`` and ``span_width`` are recomputed by
    :func:`hand_state.refresh` after every mutation; never set them by hand.
    """

    fingers: dict[Finger, FingerState] = field(
        default_factory=lambda: {f: FingerState() for f in FINGERS}
    )
    center_of_gravity: GridPos | None = None
    span_width: float = 0.0

    def placed(self) -> dict[Finger, GridPos]:
        """Positions of the fingers currently on the grid, thumb first."""
        return {
            f: self.fingers[f].current_pos
            for f in FINGERS
            if self.fingers[f].current_pos is not None
        }


# ── Evaluation and output ─────────────────────────────────────

@dataclass(frozen=True)
class CostBreakdown:
    """Per-term cost of one candidate; ``total`` is the five-term sum."""

    movement: float = 0.0
    stretch: float = 0.0
    drift: float = 0.0
    bounce: float = 0.0
    fatigue: float = 0.0
    lookahead: float = 0.0

    @property
    def total(self) -> float:
        return self.movement + self.stretch + self.drift + self.bounce + self.fatigue

    @property
    def selection_cost(self) -> float:
        """What the solver minimises: the total plus the lookahead term."""
        return self.total + self.lookahead


@dataclass(frozen=True)
class Candidate:
    hand: Hand
    finger: Finger
    breakdown: CostBreakdown

    @property
    def base_cost(self) -> float:
        return self.breakdown.total

    @property
    def lookahead_cost(self) -> float:
        return self.breakdown.lookahead


@dataclass(frozen=True)
class DebugEvent:
    """Trace entry for one input note; unplayable notes have no hand/finger."""

    pitch: int
    start_time: float
    hand: Hand | None
    finger: Finger | None
    cost: float
    difficulty: Difficulty
    row: int | None = None
    col: int | None = None
    event_index: int | None = None
    breakdown: CostBreakdown | None = None

    @property
    def assigned_hand(self) -> str:
        """``"left"``, ``"right"`` or ``"Unplayable"``."""
        if self.hand is None or self.difficulty is Difficulty.UNPLAYABLE:
            return UNPLAYABLE
        return self.hand.value

    @property
    def is_playable(self) -> bool:
        return self.difficulty is not Difficulty.UNPLAYABLE and self.hand is not None

    @property
    def pad_id(self) -> str | None:
        if self.row is None or self.col is None:
            return None
        return f"{self.row},{self.col}"


def unplayable_event(
    event: NoteEvent,
    event_index: int,
    row: int | None = None,
    col: int | None = None,
) -> DebugEvent:
    """Build the trace entry for a note that could not be assigned."""
    return DebugEvent(
        pitch=event.pitch,
        start_time=event.start_time,
        hand=None,
        finger=None,
        cost=math.inf,
        difficulty=Difficulty.UNPLAYABLE,
        row=row,
        col=col,
        event_index=event_index,
    )


@dataclass(frozen=True)
class EngineResult:
    score: float
    unplayable_count: int
    hard_count: int
    debug_events: tuple[DebugEvent, ...]
    finger_usage: dict[str, int]
    fatigue_map: dict[str, float]
    average_drift: float
    average_metrics: CostBreakdown = CostBreakdown()
