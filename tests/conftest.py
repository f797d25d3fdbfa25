"""
Shared fixtures for the pad engine tests.
"""
import pytest

from src.pad_engine.constants import load_constants
from src.pad_engine.models import Hand, NoteEvent, Performance, PitchMapping, SectionMap


@pytest.fixture
def constants():
    """Default constants from configs/engine_constants.yaml."""
    return load_constants()


@pytest.fixture
def drum_section():
    """One section on the default drum layout covering the first 64 measures."""
    return SectionMap(start_measure=1, length_in_measures=64, pitch_mapping=PitchMapping(origin_pitch=36))


@pytest.fixture
def three_note_run():
    """Pitches 36, 38, 40 a tenth of a second apart at 120 BPM."""
    return Performance(
        [NoteEvent(36, 0.0), NoteEvent(38, 0.1), NoteEvent(40, 0.2)],
        tempo=120,
    )


@pytest.fixture
def left_leaning_section():
    """Drum layout with the left hand at home on pad (0, 2) and the right far away."""
    return SectionMap(
        start_measure=1,
        length_in_measures=64,
        pitch_mapping=PitchMapping(origin_pitch=36),
        home_positions={Hand.LEFT: (0.0, 2.0), Hand.RIGHT: (7.0, 7.0)},
    )
