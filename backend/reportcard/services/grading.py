"""
Grading Service - turns a student's raw period scores into a report card.

Implements the report formula:
1. sem1 = mean of the present scores among p1..p3; sem2 likewise for p4..p6
2. yearly = (sem1 + sem2) / 2, or whichever semester average exists
3. letter grade from yearly: >= 90 A, >= 80 B, >= 70 C, >= 60 D, else F
4. footer = per-column mean over the rows that have a value in that column
5. composite = mean of the rows' yearly values (0 when no row has one)

A score that is missing, blank or not a number is "absent": it is left out
of every mean rather than counted as zero. Nothing here raises on bad
input, and nothing here does I/O.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Mapping, Optional, Sequence
from pydantic import BaseModel, Field

from reportcard.schemas import PERIOD_FIELDS

PLACEHOLDER = "-"
PASS_MARK = 60.0

# Inclusive lower bounds, checked top-down
GRADE_BOUNDARIES = (
    (90.0, "A"),
    (80.0, "B"),
    (70.0, "C"),
    (60.0, "D"),
    (0.0, "F"),
)

# Table columns that get a footer average, in display order
COLUMNS = ("p1", "p2", "p3", "sem1", "p4", "p5", "p6", "sem2", "yearly")


def parse_score(value) -> Optional[float]:
    """Parse a period score; None means absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def mean(values: Sequence[Optional[float]]) -> Optional[float]:
    """Arithmetic mean of the present values, or None if there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def combine_semesters(sem1: Optional[float], sem2: Optional[float]) -> Optional[float]:
    if sem1 is not None and sem2 is not None:
        return (sem1 + sem2) / 2
    if sem1 is not None:
        return sem1
    return sem2


def letter_grade(score: Optional[float]) -> Optional[str]:
    """Map a score to A-F. An absent score has no letter."""
    if score is None:
        return None
    for lower_bound, letter in GRADE_BOUNDARIES:
        if score >= lower_bound:
            return letter
    return "F"


def _one_decimal(value: float) -> str:
    # Exact ties round away from zero (85.25 -> "85.3"), not half-to-even
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_score(value: Optional[float]) -> str:
    """One fractional digit, or the placeholder when absent."""
    if value is None:
        return PLACEHOLDER
    return _one_decimal(value)


def _field(entry, name: str):
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


class GradeRow(BaseModel):
    """Computed values for one subject."""
    subject: str = ""
    scores: Dict[str, Optional[float]] = Field(default_factory=dict,
                                               description="p1..p6, sem1, sem2, yearly")
    letter_grade: Optional[str] = None
    passing: Optional[bool] = None
    comment: str = ""

    @property
    def avg1(self) -> Optional[float]:
        return self.scores.get("sem1")

    @property
    def avg2(self) -> Optional[float]:
        return self.scores.get("sem2")

    @property
    def yearly(self) -> Optional[float]:
        return self.scores.get("yearly")

    def cells(self) -> List[str]:
        """Display strings: subject, the nine columns, letter, comment."""
        return (
            [self.subject]
            + [format_score(self.scores.get(column)) for column in COLUMNS]
            + [self.letter_grade or PLACEHOLDER, self.comment]
        )


class ReportCard(BaseModel):
    """Everything needed to draw the grade table and its summary."""
    rows: List[GradeRow] = Field(default_factory=list)
    footer: Dict[str, Optional[float]] = Field(default_factory=dict)
    composite: float = 0.0
    composite_letter: str = "F"
    passing: bool = False

    def footer_cells(self) -> List[str]:
        return [format_score(self.footer.get(column)) for column in COLUMNS]

    @property
    def composite_display(self) -> str:
        return _one_decimal(self.composite) + "%"


def grade_row(entry) -> GradeRow:
    """Compute one subject row from a GradeEntry or a plain dict."""
    periods = [parse_score(_field(entry, name)) for name in PERIOD_FIELDS]
    sem1 = mean(periods[:3])
    sem2 = mean(periods[3:])
    yearly = combine_semesters(sem1, sem2)

    scores = {
        "p1": periods[0], "p2": periods[1], "p3": periods[2],
        "sem1": sem1,
        "p4": periods[3], "p5": periods[4], "p6": periods[5],
        "sem2": sem2,
        "yearly": yearly,
    }
    return GradeRow(
        subject=str(_field(entry, "subject") or ""),
        scores=scores,
        letter_grade=letter_grade(yearly),
        passing=None if yearly is None else yearly >= PASS_MARK,
        comment=str(_field(entry, "comment") or ""),
    )


def build_report(entries) -> ReportCard:
    """
    Compute every row plus the footer and composite in one pass.

    Footer columns with no values stay None (shown as the placeholder);
    the composite falls back to 0 instead, which grades as F.
    """
    rows = []
    totals = {column: 0.0 for column in COLUMNS}
    counts = {column: 0 for column in COLUMNS}

    for entry in entries or []:
        row = grade_row(entry)
        rows.append(row)
        for column in COLUMNS:
            value = row.scores[column]
            if value is not None:
                totals[column] += value
                counts[column] += 1

    footer = {
        column: (totals[column] / counts[column]) if counts[column] else None
        for column in COLUMNS
    }
    # Rows without a yearly value are left out of the composite entirely
    composite = footer["yearly"] if footer["yearly"] is not None else 0.0

    return ReportCard(
        rows=rows,
        footer=footer,
        composite=composite,
        composite_letter=letter_grade(composite),
        passing=composite >= PASS_MARK,
    )
