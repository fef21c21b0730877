import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from database import engine, Base, SessionLocal

# --- IMPORT ROUTERS (APIs) ---
from routers import students, results, teachers, bulk_import

# --- IMPORT MODELS (registers tables on Base) ---
from models.students import Student
from models.teachers import Teacher

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# --- CREATE DATABASE TABLES ---
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.SEED_SAMPLE_DATA:
        from seed import seed_data
        db = SessionLocal()
        try:
            seed_data(db)
        finally:
            db.close()
    logger.info("Grade manager ready (grade scale: %s, average by: %s)", config.GRADE_SCALE, config.AVERAGE_BY)
    yield


app = FastAPI(title="School Grade Manager", lifespan=lifespan)

# ==========================================
#   CORS MIDDLEWARE (frontend dev servers)
# ==========================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- REGISTER ROUTERS ---
app.include_router(students.router)
app.include_router(results.router)
app.include_router(teachers.router)
app.include_router(bulk_import.router)


@app.get("/health")
def health():
    return {"status": "ok"}
