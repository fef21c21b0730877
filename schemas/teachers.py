from pydantic import Field
from typing import Optional

from schemas.students import CamelModel


class TeacherSchema(CamelModel):
    id: str
    name: str
    subject: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    class_name: Optional[str] = Field(default=None, alias="class")


# PUT body: only the fields that were sent get merged in
class TeacherUpdateSchema(CamelModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    class_name: Optional[str] = Field(default=None, alias="class")


class TeacherUpdateResponse(CamelModel):
    message: str
    teacher: TeacherSchema
