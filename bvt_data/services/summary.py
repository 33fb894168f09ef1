from __future__ import annotations

from ..models.comparison_stats import ComparisonStats

"""SUMMARY line rendering for a comparison run."""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return str(round(seconds, 3))


def render_summary_line(stats: ComparisonStats) -> str:
    """Render a SUMMARY line from ComparisonStats.

    Format:
    SUMMARY expected_rows={n} actual_rows={n} matched={n} missing_rows={n}
    diffs={n} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2023, 1, 1, tzinfo=timezone.utc)
        >>> stats = ComparisonStats(
        ...     expected_name="e", actual_name="a", expected_rows=2, actual_rows=2,
        ...     matched_rows=2, missing_rows=0, diff_cells=1, duplicate_keys=0,
        ...     start_time=t, end_time=t, elapsed_seconds=0.0,
        ... )
        >>> render_summary_line(stats)
        'SUMMARY expected_rows=2 actual_rows=2 matched=2 missing_rows=0 diffs=1 elapsed_sec=0'
    """
    return (
        f"SUMMARY expected_rows={stats.expected_rows} "
        f"actual_rows={stats.actual_rows} "
        f"matched={stats.matched_rows} "
        f"missing_rows={stats.missing_rows} "
        f"diffs={stats.diff_cells} "
        f"elapsed_sec={_format_seconds(stats.elapsed_seconds)}"
    )
