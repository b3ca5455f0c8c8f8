from datetime import datetime, timezone
from typing import Any, Optional
from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models import Base
from models.enums import EventType, InterviewResult, InterviewType


def _string_enum(enum_cls, name: str, length: int) -> SAEnum:
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=length,
        validate_strings=True,
        values_callable=lambda e: [member.value for member in e],
    )


class JobEvent(Base):
    """
    Model for lifecycle events of a job (applications, interviews, offers...).

    event_date is a naive local wall-clock value (TIMESTAMP WITHOUT TIME ZONE):
    what the user entered is what is stored and returned.
    """
    __tablename__ = "job_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    job_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    event_type: Mapped[EventType] = mapped_column(
        _string_enum(EventType, "event_type", 30),
        nullable=False
    )

    event_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, index=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    interview_round: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    interview_type: Mapped[Optional[InterviewType]] = mapped_column(
        _string_enum(InterviewType, "interview_type", 20),
        nullable=True
    )
    interview_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    interview_result: Mapped[Optional[InterviewResult]] = mapped_column(
        _string_enum(InterviewResult, "interview_result", 20),
        nullable=True
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # "metadata" is reserved on declarative classes, so the attribute is renamed
    event_metadata: Mapped[Optional[Any]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    job = relationship("Job", back_populates="events")

    def __repr__(self) -> str:
        return f"<JobEvent(id={self.id}, job_id={self.job_id}, type='{self.event_type}', date={self.event_date})>"
