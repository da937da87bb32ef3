"""Course and CourseGame ORM models."""

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # Relationships
    students: Mapped[list["Student"]] = relationship("Student", back_populates="course")
    games: Mapped[list["CourseGame"]] = relationship("CourseGame", back_populates="course")


class CourseGame(Base):
    __tablename__ = "course_games"
    __table_args__ = (
        UniqueConstraint("course_id", "game_id", name="uq_course_game"),
    )

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    course_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("courses.id"), nullable=False
    )
    game_id: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    course: Mapped["Course"] = relationship("Course", back_populates="games")
