"""
Student Bulk Import Router
Lets a teacher upload an Excel sheet of students (optionally with their
marks) and load it into a class roster. Marked rows are graded and every
touched class is re-ranked.
"""

import io
import logging
from typing import Any, Dict, List, Optional

import pandas as pd
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from database import get_db
from models.students import Student
from services import roster
from services.grading import SUBJECTS, ValidationError, compute_grade

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bulk-import", tags=["Bulk Import"])

REQUIRED_COLUMNS = ["student_id", "name", "class"]


# ==========================================
#   CELL HELPERS
# ==========================================

def safe_str(value) -> Optional[str]:
    """Safely convert value to string, handling NaN and None"""
    if value is None or pd.isna(value):
        return None
    return str(value).strip() if str(value).strip() else None


def safe_int(value) -> Optional[int]:
    """Whole-number cells only; 85.5 stays a float so grading rejects it"""
    if value is None or pd.isna(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    return int(number) if number.is_integer() else number


def read_marks(row: pd.Series) -> Optional[Dict[str, Any]]:
    """Marks from the subject columns; None when every subject cell is blank"""
    marks = {subject: safe_int(row.get(subject)) for subject in SUBJECTS}
    if all(value is None for value in marks.values()):
        return None
    return marks


# ==========================================
#   MAIN BULK IMPORT ENDPOINT
# ==========================================

@router.post("/students")
async def bulk_import_students(
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """
    Bulk import students from an Excel file.

    Required columns: student_id, name, class
    Optional columns: roll_no, section, academic_year, tamil, english, maths,
    science, social (all five subjects or none)
    """
    if not file.filename.endswith(('.xlsx', '.xls')):
        raise HTTPException(
            status_code=400,
            detail="Invalid file format. Please upload an Excel file (.xlsx or .xls)"
        )

    try:
        contents = await file.read()
        df = pd.read_excel(io.BytesIO(contents))
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Could not read Excel file: {e}")

    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required columns: {', '.join(missing)}")

    imported = 0
    errors: List[Dict[str, Any]] = []
    touched_classes = set()
    seen_codes = set()

    for index, row in df.iterrows():
        row_no = index + 2  # header is row 1
        code = safe_str(row.get("student_id"))
        name = safe_str(row.get("name"))
        class_name = safe_str(row.get("class"))

        if not code or not name or not class_name:
            errors.append({"row": row_no, "error": "student_id, name and class are required"})
            continue
        if code in seen_codes or db.query(Student).filter(Student.student_code == code).first():
            errors.append({"row": row_no, "error": f"Student {code} already exists"})
            continue

        marks = read_marks(row)
        if marks is not None:
            try:
                compute_grade(marks)
            except ValidationError as e:
                errors.append({"row": row_no, "error": str(e)})
                continue

        db.add(Student(
            student_code=code,
            roll_no=safe_str(row.get("roll_no")) or code,
            name=name,
            class_name=class_name,
            section=safe_str(row.get("section")),
            academic_year=safe_str(row.get("academic_year")),
            marks=marks,
            is_marked=False,
        ))
        seen_codes.add(code)
        touched_classes.add(class_name)
        imported += 1

    try:
        db.flush()
        for class_name in sorted(touched_classes):
            with roster.roster_lock(class_name):
                roster.rerank_class(db, class_name)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Bulk import failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("Bulk import: %d imported, %d rejected", imported, len(errors))
    return {
        "message": f"Imported {imported} students",
        "imported": imported,
        "failed": len(errors),
        "errors": errors,
        "classes": sorted(touched_classes),
    }
