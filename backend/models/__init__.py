from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    """Base class for all database models"""
    pass

# Import all models here for Alembic autogenerate
from models.job import Job
from models.job_event import JobEvent

__all__ = ["Base", "Job", "JobEvent"]
