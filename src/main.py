"""Pad fingering solver — command-line entry point.

Usage::

    python -m src.main solve run.yaml --table --json-out out/result.json
    python -m src.main transitions run.yaml
"""

from pathlib import Path

import typer

from src.config import configure_logging
from src.pad_engine.constants import load_constants
from src.pad_engine.export import debug_events_frame, save_result
from src.pad_engine.models import EngineResult
from src.pad_engine.session import Session, load_session
from src.pad_engine.solver import SectionAwareSolver
from src.pad_engine.transitions import analyze_transitions

app = typer.Typer(help="Assign hands and fingers to notes on an 8x8 pad grid.")


def _load(run_file: Path, constants_path: Path | None) -> tuple[Session, SectionAwareSolver]:
    try:
        session = load_session(run_file)
        constants = load_constants(constants_path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return session, SectionAwareSolver(session.section_maps, constants=constants)


def _run(session: Session, solver: SectionAwareSolver) -> EngineResult:
    try:
        return solver.solve(session.performance, session.overrides)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def solve(
    run_file: Path = typer.Argument(..., help="YAML/JSON run description"),
    constants: Path = typer.Option(None, help="Engine constants YAML (defaults to configs/engine_constants.yaml)"),
    json_out: Path = typer.Option(None, help="Write the full result as JSON here"),
    table: bool = typer.Option(False, help="Print the per-note debug table"),
    verbose: bool = typer.Option(False, help="Log every assignment"),
):
    """
    Solve one run file and print the playability summary.
    """
    configure_logging(verbose)
    session, solver = _load(run_file, constants)
    result = _run(session, solver)

    typer.echo(f"Score        : {result.score:.1f}")
    typer.echo(f"Hard notes   : {result.hard_count}")
    typer.echo(f"Unplayable   : {result.unplayable_count}")
    typer.echo(f"Average drift: {result.average_drift:.2f}")
    for key, count in sorted(result.finger_usage.items()):
        typer.echo(f"  {key:<9}{count:>5}   fatigue {result.fatigue_map[key]:.2f}")

    if table:
        typer.echo(debug_events_frame(result).to_string(index=False))
    if json_out is not None:
        typer.echo(f"Saved {save_result(result, json_out)}")


@app.command()
def transitions(
    run_file: Path = typer.Argument(..., help="YAML/JSON run description"),
    constants: Path = typer.Option(None, help="Engine constants YAML"),
    top: int = typer.Option(10, help="How many of the hardest transitions to list"),
):
    """
    List the hardest note-to-note transitions of a solved run.
    """
    configure_logging(False)
    session, solver = _load(run_file, constants)
    result = _run(session, solver)
    ranked = sorted(
        analyze_transitions(list(result.debug_events)),
        key=lambda t: t.composite_difficulty,
        reverse=True,
    )
    for t in ranked[:top]:
        typer.echo(
            f"{t.from_index:>4} -> {t.to_index:<4} difficulty {t.composite_difficulty:.2f}  "
            f"dt {t.time_delta_ms:7.1f} ms  distance {t.grid_distance:5.2f}  "
            f"{'hand switch' if t.hand_switch else ''}"
        )


if __name__ == "__main__":
    app()
