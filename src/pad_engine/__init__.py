"""Pad Engine — section-aware hand/finger assignment for 8×8 pad grids.

Sub-package containing:
    models        – note, section, hand-state and result types
    grid_mapper   – pitch ↔ pad coordinate translation
    constants     – YAML-backed engine constants
    hand_state    – per-hand position / fatigue bookkeeping
    feasibility   – reach, finger-order and chord checks
    cost_model    – movement / stretch / drift / bounce / fatigue terms
    solver        – greedy solver with one-step lookahead
    result        – trace aggregation into an EngineResult
    transitions   – movement metrics between consecutive notes
    session       – run-file loading for the CLI
    export        – JSON / pandas output
"""
