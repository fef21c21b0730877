"""
Grading Engine
Turns raw subject marks into total, percentage, grade and pass/fail status,
ranks a class roster and aggregates class statistics.

Everything here is pure: callers hand in a roster snapshot and get new
records back. Loading and saving the roster is the job of services.roster.
"""

import math
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from schemas.students import GradeResult, RosterStatistics, StudentRecord

SUBJECTS = ("tamil", "english", "maths", "science", "social")
SUBJECT_LABELS = {
    "tamil": "Tamil",
    "english": "English",
    "maths": "Mathematics",
    "science": "Science",
    "social": "Social Science",
}
MAX_SUBJECT_MARKS = 100
MAX_TOTAL_MARKS = MAX_SUBJECT_MARKS * len(SUBJECTS)
PASS_PERCENTAGE = 40

PASS = "Pass"
FAIL = "Fail"


class ValidationError(ValueError):
    """Marks map is incomplete or holds a value outside 0-100."""

    def __init__(self, message: str, subject: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.subject = subject
        self.value = value


# ==========================================
#   GRADE SCALE
# ==========================================

class GradeScale:
    """Ordered (threshold, letter) bands, highest first. Bounds are inclusive."""

    def __init__(self, name: str, bands: Sequence[Tuple[float, str]], fallback: str = "F"):
        self.name = name
        self.bands = tuple(sorted(bands, key=lambda band: band[0], reverse=True))
        self.fallback = fallback

    def letter(self, percentage: float) -> str:
        for threshold, letter in self.bands:
            if percentage >= threshold:
                return letter
        return self.fallback

    def __repr__(self):
        return f"GradeScale({self.name!r})"


DETAILED_SCALE = GradeScale("detailed", [
    (90, "A+"), (80, "A"), (70, "B+"), (60, "B"), (50, "C"), (40, "D"),
])
SIMPLE_SCALE = GradeScale("simple", [
    (90, "A+"), (80, "A"), (70, "B"), (60, "C"), (40, "D"),
])
DEFAULT_SCALE = DETAILED_SCALE

SCALES = {scale.name: scale for scale in (DETAILED_SCALE, SIMPLE_SCALE)}


def get_scale(name: str) -> GradeScale:
    try:
        return SCALES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown grade scale '{name}'. Choose from: {', '.join(SCALES)}")


# ==========================================
#   GRADE CALCULATOR
# ==========================================

def validate_marks(marks: Mapping[str, Any]) -> dict:
    if not isinstance(marks, Mapping):
        raise ValidationError("Invalid marks data")

    unknown = sorted(set(marks) - set(SUBJECTS))
    if unknown:
        raise ValidationError(f"Unknown subject '{unknown[0]}'", subject=unknown[0])

    clean = {}
    for subject in SUBJECTS:
        value = marks.get(subject)
        if value is None:
            raise ValidationError(f"Missing marks for {subject}", subject=subject)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                f"Invalid marks for {subject}. Must be a whole number", subject=subject, value=value
            )
        if value < 0 or value > MAX_SUBJECT_MARKS:
            raise ValidationError(
                f"Invalid marks for {subject}. Must be between 0-{MAX_SUBJECT_MARKS}",
                subject=subject, value=value,
            )
        clean[subject] = value
    return clean


def compute_grade(marks: Mapping[str, Any], scale: GradeScale = DEFAULT_SCALE) -> GradeResult:
    clean = validate_marks(marks)
    total = sum(clean[subject] for subject in SUBJECTS)
    percentage = round(total / MAX_TOTAL_MARKS * 100, 1)
    return GradeResult(
        total_marks=total,
        percentage=percentage,
        grade=scale.letter(percentage),
        status=PASS if percentage >= PASS_PERCENTAGE else FAIL,
    )


def subject_grade(mark: int, scale: GradeScale = DEFAULT_SCALE) -> str:
    """Letter grade of a single subject mark (out of 100)."""
    return scale.letter(mark / MAX_SUBJECT_MARKS * 100)


def apply_grade(record: StudentRecord, scale: GradeScale = DEFAULT_SCALE) -> StudentRecord:
    """Copy of the record with every derived field recomputed from its marks."""
    if record.marks is None:
        return record.model_copy(update={
            "total_marks": None, "percentage": None, "grade": None,
            "status": None, "is_marked": False, "rank": None,
        })
    result = compute_grade(record.marks, scale)
    return record.model_copy(update={
        "marks": validate_marks(record.marks),
        "total_marks": result.total_marks,
        "percentage": result.percentage,
        "grade": result.grade,
        "status": result.status,
        "is_marked": True,
    })


# ==========================================
#   RANKING ENGINE
# ==========================================

def rank_roster(roster: Sequence[StudentRecord], scale: GradeScale = DEFAULT_SCALE) -> List[StudentRecord]:
    """
    Rank every marked student: passed before failed, each group by total
    descending. sorted() is stable so equal totals keep roster order and
    still get distinct ranks. Unmarked students follow, unranked.
    """
    graded = [apply_grade(record, scale) for record in roster]
    marked = [r for r in graded if r.is_marked]
    unmarked = [r for r in graded if not r.is_marked]

    passed = sorted((r for r in marked if r.status == PASS), key=lambda r: r.total_marks, reverse=True)
    failed = sorted((r for r in marked if r.status == FAIL), key=lambda r: r.total_marks, reverse=True)

    ranked = [
        record.model_copy(update={"rank": position})
        for position, record in enumerate(passed + failed, start=1)
    ]
    return ranked + unmarked


# ==========================================
#   ROSTER STATISTICS
# ==========================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_statistics(roster: Sequence[StudentRecord], average_by: str = "percentage",
                       scale: GradeScale = DEFAULT_SCALE) -> RosterStatistics:
    if average_by not in ("percentage", "total"):
        raise ValueError("average_by must be 'percentage' or 'total'")

    marked = [apply_grade(r, scale) for r in roster if r.marks is not None]
    stats = RosterStatistics(
        total_students=len(roster),
        students_with_marks=len(marked),
        pending_evaluations=len(roster) - len(marked),
    )
    if not marked:
        return stats

    passed = sum(1 for r in marked if r.status == PASS)
    if average_by == "total":
        class_average = float(_round_half_up(sum(r.total_marks for r in marked) / len(marked)))
    else:
        class_average = round(sum(r.percentage for r in marked) / len(marked), 1)

    stats.class_average = class_average
    stats.top_score = max(r.total_marks for r in marked)
    stats.pass_percentage = _round_half_up(passed / len(marked) * 100)
    stats.passed_students = passed
    stats.failed_students = len(marked) - passed
    return stats
