"""Clone-tracker CLI: entry-point for all backend operations.

Usage:
    python cli/main.py --help

Command groups:
    db           → store initialisation and sample data
    track        → record one generation attempt
    stats        → model / provider / website reports
    model-stats  → aggregate for one model
    export       → full raw dataset as JSON
    sync         → replicate recent records into the analytical copy
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from datetime import timedelta
from typing import Optional

import typer

from backend.analytics import AnalyticsEngine
from backend.config import settings
from backend.db import open_analytics_store, open_store
from backend.errors import TrackerError
from backend.sync import sync_to_analytics
from backend.tracker import Tracker
from cli.rendering import render_complexity, render_models, render_providers

app = typer.Typer(
    name="clone-tracker",
    help="Clone-tracker backend CLI.",
    no_args_is_help=True,
)

# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Store operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


def _fail(prefix: str, exc: Exception) -> None:
    typer.echo(f"[{prefix}] Error: {exc}", err=True)
    raise typer.Exit(1)


@db_app.command("init")
def db_init() -> None:
    """Create the configured store (files or tables) if it does not exist."""
    try:
        with open_store():
            pass
    except TrackerError as exc:
        _fail("db init", exc)
    location = settings.db_path if settings.store_backend == "sqlite" else settings.workspace_dir
    typer.echo(f"[db init] {settings.store_backend} store ready at {location}")


@db_app.command("seed")
def db_seed() -> None:
    """Insert the bundled sample websites, attempts and benchmarks."""
    try:
        with open_store() as store:
            added = Tracker(store).seed_sample_data()
    except TrackerError as exc:
        _fail("db seed", exc)
    typer.echo(f"[db seed] Added {added} sample attempt(s).")


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------

@app.command("track")
def track(
    url: str = typer.Option(..., help="Target website URL."),
    model: str = typer.Option(..., help="Model identifier, e.g. ollama/llama3.2:7b."),
    duration_ms: int = typer.Option(..., "--duration-ms", help="Generation time in ms."),
    code_file: Optional[Path] = typer.Option(
        None, "--code-file", help="File holding the generated output."
    ),
    status: str = typer.Option("success", help="pending | success | error."),
    error: Optional[str] = typer.Option(None, help="Error detail for failed attempts."),
) -> None:
    """Record one generation attempt."""
    try:
        generated = code_file.read_text(encoding="utf-8") if code_file else ""
        with open_store() as store:
            attempt_id = Tracker(store).track_attempt(
                url, model, generated, duration_ms, status=status, error_detail=error
            )
    except (TrackerError, OSError, UnicodeDecodeError) as exc:
        _fail("track", exc)
    typer.echo(f"[track] Recorded attempt {attempt_id} for {url}")


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@app.command("stats")
def stats(
    analytical: bool = typer.Option(
        False, "--analytical", help="Read from the analytical copy instead of the primary store."
    ),
) -> None:
    """Print the model summary, provider comparison and website complexity."""
    try:
        with (open_analytics_store() if analytical else open_store()) as store:
            engine = AnalyticsEngine(store)
            models = engine.model_performance_summary()
            providers = engine.provider_comparison()
            complexity = engine.website_complexity_analysis()
    except TrackerError as exc:
        _fail("stats", exc)

    if not models:
        typer.echo("[stats] No clone attempts recorded.")
        return
    typer.echo(render_models(models))
    typer.echo("")
    typer.echo(render_providers(providers))
    typer.echo("")
    typer.echo(render_complexity(complexity))


@app.command("model-stats")
def model_stats(model: str = typer.Argument(..., help="Model identifier.")) -> None:
    """Print aggregate stats for one model."""
    try:
        with open_store() as store:
            result = Tracker(store).model_stats(model)
    except TrackerError as exc:
        _fail("model-stats", exc)
    if result is None:
        typer.echo(f"[model-stats] No attempts recorded for {model!r}.")
        raise typer.Exit(1)
    typer.echo(json.dumps(result.to_dict(), indent=2))


@app.command("export")
def export(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file."),
) -> None:
    """Dump every website and attempt as JSON."""
    try:
        with open_store() as store:
            data = store.export_data()
    except TrackerError as exc:
        _fail("export", exc)
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output is None:
        typer.echo(text)
        return
    output.write_text(text, encoding="utf-8")
    typer.echo(
        f"[export] Wrote {len(data['websites'])} website(s) and "
        f"{len(data['attempts'])} attempt(s) to {output}"
    )


@app.command("sync")
def sync(
    days: int = typer.Option(
        settings.sync_window_days, help="Trailing window, in days."
    ),
) -> None:
    """Copy recent records from the primary store into the analytical copy."""
    try:
        with open_store() as primary, open_analytics_store() as analytics:
            result = sync_to_analytics(primary, analytics, window=timedelta(days=days))
    except TrackerError as exc:
        _fail("sync", exc)
    typer.echo(
        f"[sync] Copied {result.websites} website(s) and {result.attempts} attempt(s) "
        f"to {settings.analytics_db_path}"
    )


if __name__ == "__main__":
    app()
