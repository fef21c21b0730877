import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.teachers import Teacher
from schemas.teachers import TeacherSchema, TeacherUpdateSchema, TeacherUpdateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/teacher", tags=["Teachers"])


def to_schema(teacher: Teacher) -> TeacherSchema:
    return TeacherSchema(
        id=teacher.teacher_code,
        name=teacher.name,
        subject=teacher.subject,
        email=teacher.email,
        phone=teacher.phone,
        class_name=teacher.class_name,
    )


def find_teacher(db: Session, teacher_id: str) -> Teacher:
    teacher = db.query(Teacher).filter(Teacher.teacher_code == teacher_id).first()
    if not teacher:
        raise HTTPException(status_code=404, detail="Teacher not found")
    return teacher


# 1. API: Teacher profile
@router.get("/{teacher_id}", response_model=TeacherSchema)
def get_teacher(teacher_id: str, db: Session = Depends(get_db)):
    return to_schema(find_teacher(db, teacher_id))


# 2. API: Update teacher profile (merge, id never changes)
@router.put("/{teacher_id}", response_model=TeacherUpdateResponse)
def update_teacher(teacher_id: str, payload: TeacherUpdateSchema, db: Session = Depends(get_db)):
    teacher = find_teacher(db, teacher_id)
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes and not changes["name"]:
        raise HTTPException(status_code=400, detail="name cannot be empty")

    for field, value in changes.items():
        setattr(teacher, field, value)

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Could not update teacher %s: %s", teacher_id, e)
        raise HTTPException(status_code=500, detail=str(e))

    db.refresh(teacher)
    return TeacherUpdateResponse(message="Teacher profile updated successfully", teacher=to_schema(teacher))
