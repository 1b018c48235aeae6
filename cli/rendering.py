"""Utilities for rendering analytics reports in the CLI."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from backend.db.models import ModelSummary, ProviderComparison, WebsiteComplexity


def _fmt(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def render_table(headers: Sequence[str], rows: Sequence[Sequence[Any]], title: Optional[str] = None) -> str:
    """Render *rows* as a fixed-width text table.

    Args:
        headers: Column titles.
        rows: One sequence of cell values per row; floats get two decimals,
            ``None`` renders as ``-``.
        title: Optional line printed above the table.

    Returns:
        The table as a single string (no trailing newline).
    """
    cells = [[_fmt(v) for v in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    lines = []
    if title:
        lines.append(title)
    lines.append("  ".join(h.ljust(w) for h, w in zip(headers, widths)))
    lines.append("  ".join("-" * w for w in widths))
    for row in cells:
        lines.append("  ".join(c.ljust(w) for c, w in zip(row, widths)))
    return "\n".join(lines)


def render_models(rows: Sequence[ModelSummary]) -> str:
    return render_table(
        ["model", "provider", "attempts", "success %", "avg ms", "avg bytes", "last used"],
        [
            (r.model_name, r.provider, r.total_attempts, r.success_rate,
             r.avg_generation_time, r.avg_code_size, r.last_used)
            for r in rows
        ],
        title="Models (fastest first)",
    )


def render_providers(rows: Sequence[ProviderComparison]) -> str:
    return render_table(
        ["provider", "attempts", "success %", "avg ms", "avg bytes"],
        [
            (r.provider, r.total_attempts, r.success_rate, r.avg_generation_time, r.avg_code_size)
            for r in rows
        ],
        title="Providers (most successful first)",
    )


def render_complexity(rows: Sequence[WebsiteComplexity]) -> str:
    return render_table(
        ["domain", "words", "chars", "attempts", "avg ms", "avg bytes"],
        [
            (r.domain, r.word_count, r.content_length, r.clone_attempts,
             r.avg_generation_time, r.avg_code_size)
            for r in rows
        ],
        title="Websites (largest content first)",
    )
