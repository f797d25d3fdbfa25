"""Grid Mapper — stateless translation between pitches and pad positions.

The layout is linear: the mapping's ``origin_pitch`` sits on pad ``(0, 0)``
and each following pitch moves one column to the right, wrapping to the
next row up after the last column.
"""

from __future__ import annotations

import math

from .models import GridPos, PitchMapping


def note_to_grid(pitch: int, mapping: PitchMapping) -> tuple[int, int] | None:
    """Return the ``(row, col)`` pad for *pitch*, or ``None`` if off-grid.

    Args:
        pitch: MIDI note number.
        mapping: Active pitch mapping.

    Returns:
        The pad position, or ``None`` when the pitch falls below the origin
        or beyond the top row.
    """
    offset = pitch - mapping.origin_pitch
    if offset < 0:
        return None

    row, col = divmod(offset, mapping.cols)
    if row >= mapping.rows:
        return None
    return row, col


def grid_to_note(row: int, col: int, mapping: PitchMapping) -> int:
    """Return the pitch played by pad ``(row, col)`` under *mapping*."""
    return mapping.origin_pitch + row * mapping.cols + col


def grid_distance(a: GridPos, b: GridPos) -> float:
    """Euclidean distance between two grid positions, in cells."""
    return math.hypot(b[0] - a[0], b[1] - a[1])
