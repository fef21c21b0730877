from sqlalchemy import Column, Integer, String
from database import Base

class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    teacher_code = Column(String(50), unique=True, index=True)   # e.g. "TCH-7284"
    name = Column(String(100))
    subject = Column(String(100), nullable=True)
    email = Column(String(150), nullable=True)
    phone = Column(String(20), nullable=True)
    class_name = Column(String(50), nullable=True)                # class teacher of
