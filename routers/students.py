import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from database import get_db
from models.students import Student
from schemas.students import (
    StudentRecord, StudentCreateSchema, StudentUpdateSchema,
    MarksSubmitSchema, MarksUpdateResponse,
)
from services import roster
from services.grading import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Students"])

# Profile fields a PUT may change but never clear
REQUIRED_PROFILE_FIELDS = ("roll_no", "name", "class_name")


# ===========================
#        ROSTER APIs
# ===========================

# 1. API: Fetch all students (teacher marks-entry grid)
@router.get("/students", response_model=List[StudentRecord])
def list_students(class_name: Optional[str] = None, db: Session = Depends(get_db)):
    return roster.load_roster(db, class_name)


# 2. API: Add a student (created unmarked)
@router.post("/students", response_model=StudentRecord, status_code=201)
def create_student(payload: StudentCreateSchema, db: Session = Depends(get_db)):
    exists = db.query(Student).filter(Student.student_code == payload.id).first()
    if exists:
        raise HTTPException(status_code=409, detail=f"Student {payload.id} already exists")

    student = Student(
        student_code=payload.id,
        roll_no=payload.roll_no or payload.id,
        name=payload.name,
        class_name=payload.class_name,
        section=payload.section,
        academic_year=payload.academic_year,
        is_marked=False,
    )
    db.add(student)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Could not create student %s: %s", payload.id, e)
        raise HTTPException(status_code=500, detail=str(e))

    db.refresh(student)
    logger.info("Student %s added to class %s", student.student_code, student.class_name)
    return roster.to_record(student)


# ===========================
#        PROFILE APIs
# ===========================

# 3. API: Student profile (dashboard)
@router.get("/student/{student_id}", response_model=StudentRecord)
def get_student(student_id: str, db: Session = Depends(get_db)):
    try:
        return roster.to_record(roster.get_student(db, student_id))
    except roster.StudentNotFound:
        raise HTTPException(status_code=404, detail="Student not found")


# 4. API: Update profile (marks are only changed through /marks)
@router.put("/student/{student_id}", response_model=StudentRecord)
def update_student(student_id: str, payload: StudentUpdateSchema, db: Session = Depends(get_db)):
    try:
        student = roster.get_student(db, student_id)
    except roster.StudentNotFound:
        raise HTTPException(status_code=404, detail="Student not found")

    changes = payload.model_dump(exclude_unset=True)
    blank = [field for field in REQUIRED_PROFILE_FIELDS if field in changes and not changes[field]]
    if blank:
        raise HTTPException(status_code=400, detail=f"{blank[0]} cannot be empty")

    old_class = student.class_name
    for field, value in changes.items():
        setattr(student, field, value)

    try:
        # Moving class changes two rosters
        if student.class_name != old_class:
            db.flush()
            roster.rerank_class(db, old_class)
            roster.rerank_class(db, student.class_name)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

    db.refresh(student)
    return roster.to_record(student)


# ===========================
#       MARKS ENTRY API
# ===========================

# 5. API: Submit marks -> grade + full class re-rank
@router.post("/student/{student_id}/marks", response_model=MarksUpdateResponse)
def submit_marks(student_id: str, payload: MarksSubmitSchema, db: Session = Depends(get_db)):
    try:
        record = roster.submit_marks(db, student_id, payload.marks)
    except ValidationError as e:
        logger.warning("Rejected marks for %s: %s", student_id, e)
        raise HTTPException(status_code=400, detail=str(e))
    except roster.StudentNotFound:
        raise HTTPException(status_code=404, detail="Student not found")

    return MarksUpdateResponse(message="Marks updated successfully", student=record)
