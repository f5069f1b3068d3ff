"""Display helpers shared by grading views: rounding, units, labels."""

from decimal import ROUND_HALF_UP, Decimal

from academy.grading.contracts import CountScored, ExamMode, PointScored, SimpleCount


def round_display(value: float, digits: int = 1) -> float:
    """Round half away from zero for display (2.25 -> 2.3), unlike float round()."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def unit_label(mode: ExamMode) -> str:
    """Unit a raw score is counted in for the given exam mode."""
    if isinstance(mode, PointScored):
        return "pts"
    if isinstance(mode, (CountScored, SimpleCount)):
        return "items"
    raise TypeError(f"Unsupported exam mode: {mode!r}")


def format_score(score: float, mode: ExamMode, maximum: float | None = None) -> str:
    """Render a score with its unit, e.g. '87 pts' or '18 / 20 items'."""
    value = round_display(score)
    text = f"{value:g}"
    unit = unit_label(mode)
    if maximum is None:
        return f"{text} {unit}"
    return f"{text} / {round_display(maximum):g} {unit}"


def short_title(title: str, limit: int = 8) -> str:
    """Truncate an exam title for chart axes."""
    if len(title) <= limit:
        return title
    return title[:limit] + "..."
