"""
Roster Service
Bridges the database and the grading engine: loads a class roster as
StudentRecord values, writes grades and ranks back, and serializes
marks updates per class so every re-rank sees a complete roster.
"""

import logging
import threading
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

import config
from models.students import Student
from schemas.students import RosterStatistics, StudentRecord
from services.grading import (
    GradeScale, apply_grade, compute_grade, compute_statistics, get_scale, rank_roster,
)

logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
_class_locks: Dict[str, threading.Lock] = {}


class StudentNotFound(LookupError):
    pass


def active_scale() -> GradeScale:
    return get_scale(config.GRADE_SCALE)


def roster_lock(class_name: str) -> threading.Lock:
    """One writer per class roster at a time."""
    with _locks_guard:
        if class_name not in _class_locks:
            _class_locks[class_name] = threading.Lock()
        return _class_locks[class_name]


# ==========================================
#   ROW <-> RECORD
# ==========================================

def to_record(student: Student) -> StudentRecord:
    return StudentRecord(
        id=student.student_code,
        roll_no=student.roll_no or student.student_code,
        name=student.name,
        class_name=student.class_name,
        section=student.section,
        academic_year=student.academic_year,
        marks=student.marks,
        total_marks=student.total_marks,
        percentage=student.percentage,
        grade=student.grade,
        status=student.status,
        is_marked=bool(student.is_marked),
        rank=student.rank,
    )


def _write_derived(student: Student, record: StudentRecord):
    student.marks = record.marks
    student.total_marks = record.total_marks
    student.percentage = record.percentage
    student.grade = record.grade
    student.status = record.status
    student.is_marked = record.is_marked
    student.rank = record.rank


# ==========================================
#   QUERIES
# ==========================================

def load_roster(db: Session, class_name: Optional[str] = None) -> List[StudentRecord]:
    query = db.query(Student)
    if class_name:
        query = query.filter(Student.class_name == class_name)
    return [to_record(s) for s in query.order_by(Student.id).all()]


def get_student(db: Session, student_code: str) -> Student:
    student = db.query(Student).filter(Student.student_code == student_code).first()
    if not student:
        raise StudentNotFound(student_code)
    return student


def class_rankings(db: Session, class_name: Optional[str] = None) -> List[StudentRecord]:
    """Marked students in rank order, as last stored."""
    ranked = [r for r in load_roster(db, class_name) if r.is_marked and r.rank]
    # Ranks are per class; keep classes apart when listing the whole school
    return sorted(ranked, key=lambda r: (r.class_name, r.rank))


def class_statistics(db: Session, class_name: Optional[str] = None,
                     average_by: Optional[str] = None) -> RosterStatistics:
    return compute_statistics(
        load_roster(db, class_name),
        average_by=average_by or config.AVERAGE_BY,
        scale=active_scale(),
    )


# ==========================================
#   UPDATES
# ==========================================

def rerank_class(db: Session, class_name: str) -> List[StudentRecord]:
    """Full re-rank of one class, written back to the session (no commit)."""
    rows = db.query(Student).filter(Student.class_name == class_name).order_by(Student.id).all()
    by_code = {row.student_code: row for row in rows}

    ranked = rank_roster([to_record(row) for row in rows], active_scale())
    for record in ranked:
        _write_derived(by_code[record.id], record)

    logger.debug("Re-ranked class %s: %d students", class_name, len(rows))
    return ranked


def submit_marks(db: Session, student_code: str, marks: dict) -> StudentRecord:
    """
    Replace a student's marks and re-rank their class.
    Raises grading.ValidationError before anything is touched,
    StudentNotFound if the student does not exist.
    """
    scale = active_scale()
    compute_grade(marks, scale)

    student = get_student(db, student_code)
    with roster_lock(student.class_name):
        try:
            student.marks = dict(marks)
            _write_derived(student, apply_grade(to_record(student), scale))
            rerank_class(db, student.class_name)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(student)

    logger.info("Marks updated for %s (total=%s, rank=%s)", student_code, student.total_marks, student.rank)
    return to_record(student)
