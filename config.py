"""
Configuration settings for the School Grade Manager
"""
import os

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./school_grades.db")

# Grading configuration
GRADE_SCALE = os.getenv("GRADE_SCALE", "detailed")   # detailed / simple
AVERAGE_BY = os.getenv("AVERAGE_BY", "percentage")   # percentage / total
ACADEMIC_YEAR = os.getenv("ACADEMIC_YEAR", "2024-2025")

# Server
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SEED_SAMPLE_DATA = os.getenv("SEED_SAMPLE_DATA", "true").lower() in ("1", "true", "yes")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://127.0.0.1:5500,http://localhost:5500,http://localhost:5000",
    ).split(",")
    if origin.strip()
]
