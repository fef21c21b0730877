from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class CamelModel(BaseModel):
    # API speaks camelCase (totalMarks, isMarked...), python code uses snake_case
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ===========================
#     GRADING ENGINE TYPES
# ===========================

class GradeResult(CamelModel):
    total_marks: int
    percentage: float
    grade: str
    status: str


class StudentRecord(CamelModel):
    id: str
    roll_no: str
    name: str
    class_name: str = Field(alias="class")
    section: Optional[str] = None
    academic_year: Optional[str] = None

    marks: Optional[Dict[str, int]] = None

    # Derived from marks, recomputed together
    total_marks: Optional[int] = None
    percentage: Optional[float] = None
    grade: Optional[str] = None
    status: Optional[str] = None
    is_marked: bool = False
    rank: Optional[int] = None


class RosterStatistics(CamelModel):
    total_students: int = 0
    students_with_marks: int = 0
    pending_evaluations: int = 0
    class_average: float = 0.0
    top_score: int = 0
    pass_percentage: int = 0
    passed_students: int = 0
    failed_students: int = 0


# ===========================
#       REQUEST SCHEMAS
# ===========================

class StudentCreateSchema(CamelModel):
    id: str
    roll_no: Optional[str] = None
    name: str
    class_name: str = Field(alias="class")
    section: Optional[str] = None
    academic_year: Optional[str] = None


class StudentUpdateSchema(CamelModel):
    roll_no: Optional[str] = None
    name: Optional[str] = None
    class_name: Optional[str] = Field(default=None, alias="class")
    section: Optional[str] = None
    academic_year: Optional[str] = None


class MarksSubmitSchema(BaseModel):
    # Values stay loose here, range/presence checks belong to the grading engine
    marks: Dict[str, Any]


# ===========================
#       RESPONSE SCHEMAS
# ===========================

class MarksUpdateResponse(CamelModel):
    message: str
    student: StudentRecord


class SubjectResult(CamelModel):
    name: str
    marks: int
    grade: str


class ResultSummary(CamelModel):
    total_marks: int = 0
    percentage: float = 0
    grade: str = "N/A"
    status: str = "Unmarked"
    rank: Optional[int] = None


class ResultResponse(CamelModel):
    student: StudentRecord
    subjects: List[SubjectResult]
    summary: ResultSummary


class RankingsResponse(CamelModel):
    stats: RosterStatistics
    academic_year: str
    rankings: List[StudentRecord]
