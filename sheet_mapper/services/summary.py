from __future__ import annotations

from ..models.read_result import ReadResult

"""SUMMARY line rendering for sheet reads."""

__all__ = [
    "render_summary_line",
    "render_summary_body",
    "format_number",
]


def format_number(value: float) -> str:
    """Compact number formatting (no trailing .0, no scientific notation)."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ReadResult) -> str:
    """Render the SUMMARY line of a read.

    Format:
    SUMMARY sheet={name} rows={total} kept={kept} excluded={excluded}
    skipped_fields={skipped} elapsed_sec={elapsed} throughput_rps={throughput}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> render_summary_line(ReadResult("Staff", [], start, end))
        'SUMMARY sheet=Staff rows=0 kept=0 excluded=0 skipped_fields=0 elapsed_sec=2 throughput_rps=0'
    """
    return f"SUMMARY {render_summary_body(result)}"


def render_summary_body(result: ReadResult) -> str:
    """SUMMARY line without its label (the logging formatter adds it)."""
    sheet = result.sheet_name if result.sheet_name is not None else "-"
    return (
        f"sheet={sheet} "
        f"rows={result.total_rows} "
        f"kept={result.kept_rows} "
        f"excluded={result.excluded_rows} "
        f"skipped_fields={result.skipped_fields} "
        f"elapsed_sec={format_number(result.elapsed_seconds)} "
        f"throughput_rps={format_number(result.throughput_rows_per_sec)}"
    )
