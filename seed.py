import logging

import config
from database import SessionLocal, engine, Base
from models.students import Student
from models.teachers import Teacher
from services import roster

logger = logging.getLogger(__name__)

SAMPLE_TEACHERS = [
    {"teacher_code": "TCH-7284", "name": "Prof. Sarah Johnson", "subject": "Mathematics",
     "email": "sarah.johnson@school.edu", "class_name": "10A"},
]

# Class 10A: half the class already has marks entered
SAMPLE_STUDENTS = [
    ("S001", "Rahul Kumar", {"tamil": 85, "english": 78, "maths": 92, "science": 88, "social": 80}),
    ("S002", "Priya Sharma", {"tamil": 90, "english": 85, "maths": 95, "science": 92, "social": 88}),
    ("S003", "Amit Patel", None),
    ("S004", "Sneha Reddy", None),
    ("S005", "Vikram Singh", {"tamil": 75, "english": 82, "maths": 78, "science": 80, "social": 85}),
    ("S006", "Anjali Gupta", None),
    ("S007", "Rajesh Kumar", {"tamil": 88, "english": 90, "maths": 85, "science": 87, "social": 82}),
    ("S008", "Pooja Mehta", None),
    ("S009", "Sanjay Verma", {"tamil": 82, "english": 78, "maths": 85, "science": 80, "social": 79}),
    ("S010", "Neha Singh", None),
]


def seed_data(db) -> bool:
    """Fill empty tables with the sample class. Returns False if data already exists."""
    if db.query(Student).count() or db.query(Teacher).count():
        logger.info("Sample data skipped: tables already have rows")
        return False

    for t in SAMPLE_TEACHERS:
        db.add(Teacher(**t))

    for code, name, marks in SAMPLE_STUDENTS:
        db.add(Student(
            student_code=code, roll_no=code, name=name,
            class_name="10A", section="A", academic_year=config.ACADEMIC_YEAR,
            marks=marks, is_marked=False,
        ))
    db.flush()

    roster.rerank_class(db, "10A")
    db.commit()
    logger.info("Seeded %d students and %d teachers", len(SAMPLE_STUDENTS), len(SAMPLE_TEACHERS))
    return True


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_data(db)
    finally:
        db.close()
