"""ORM models package - exports all models and Base."""

from app.database import Base
from app.models.attempt_record import AttemptRecord
from app.models.course import Course, CourseGame
from app.models.level_definition import LevelDefinition
from app.models.point_total import StudentPointTotal
from app.models.student import Student

__all__ = [
    "Base",
    "AttemptRecord",
    "Course",
    "CourseGame",
    "LevelDefinition",
    "Student",
    "StudentPointTotal",
]
