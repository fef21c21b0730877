from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

import config
from database import get_db
from schemas.students import (
    ResultResponse, ResultSummary, SubjectResult, RankingsResponse, RosterStatistics,
)
from services import roster
from services.grading import SUBJECTS, SUBJECT_LABELS, subject_grade

router = APIRouter(prefix="/api", tags=["Results"])


# ===========================
#   PART 1: RESULT SHEET
# ===========================

# 1. API: Result of one student (View Result page)
@router.get("/result/{student_id}", response_model=ResultResponse)
def get_result(student_id: str, db: Session = Depends(get_db)):
    try:
        record = roster.to_record(roster.get_student(db, student_id))
    except roster.StudentNotFound:
        raise HTTPException(status_code=404, detail="Student not found")

    scale = roster.active_scale()
    subjects = []
    if record.marks:
        subjects = [
            SubjectResult(
                name=SUBJECT_LABELS[subject],
                marks=record.marks[subject],
                grade=subject_grade(record.marks[subject], scale),
            )
            for subject in SUBJECTS
        ]

    # Unmarked students get the placeholder summary
    summary = ResultSummary()
    if record.is_marked:
        summary = ResultSummary(
            total_marks=record.total_marks,
            percentage=record.percentage,
            grade=record.grade,
            status=record.status,
            rank=record.rank,
        )

    return ResultResponse(student=record, subjects=subjects, summary=summary)


# ===========================
#   PART 2: RANKINGS & STATS
# ===========================

# 2. API: Class rankings (student + teacher rank pages)
@router.get("/rankings", response_model=RankingsResponse)
def get_rankings(class_name: Optional[str] = None, db: Session = Depends(get_db)):
    return RankingsResponse(
        stats=roster.class_statistics(db, class_name),
        academic_year=config.ACADEMIC_YEAR,
        rankings=roster.class_rankings(db, class_name),
    )


# 3. API: Class statistics (teacher dashboard)
@router.get("/statistics", response_model=RosterStatistics)
def get_statistics(class_name: Optional[str] = None, average_by: Optional[str] = None,
                   db: Session = Depends(get_db)):
    try:
        return roster.class_statistics(db, class_name, average_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
