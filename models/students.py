from sqlalchemy import Column, Integer, String, Float, Boolean, JSON
from database import Base

class Student(Base):
    __tablename__ = "students"

    # Autoincrement id doubles as roster order (ranking ties keep this order)
    id = Column(Integer, primary_key=True, index=True)
    student_code = Column(String(50), unique=True, index=True)   # e.g. "S001"
    roll_no = Column(String(50))
    name = Column(String(100))

    # --- ACADEMIC INFO ---
    class_name = Column(String(50), index=True)
    section = Column(String(10), nullable=True)
    academic_year = Column(String(20), nullable=True)

    # --- MARKS ---
    # {"tamil": 85, "english": 78, ...}, NULL until the first submission
    marks = Column(JSON, nullable=True)

    # --- DERIVED (written only by services.roster) ---
    total_marks = Column(Integer, nullable=True)
    percentage = Column(Float, nullable=True)
    grade = Column(String(5), nullable=True)
    status = Column(String(10), nullable=True)       # Pass / Fail
    is_marked = Column(Boolean, default=False)
    rank = Column(Integer, nullable=True)
