from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for batch runs."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # 指数表記を避ける
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line of a batch run.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed} ctn={ctn} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=2, failed_files=0, total_ctn=120,
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(2, result)
        'SUMMARY files=2/2 success=2 failed=0 ctn=120 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"ctn={result.total_ctn} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
