from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy import Enum as SQLAEnum
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.datetime_utils import get_now_utc
from app.models.base import Base, generate_uuid


class ApplicationStatusEnum(str, Enum):
    applied = "applied"
    shortlisted = "shortlisted"
    rejected = "rejected"
    selected = "selected"


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    student_id = Column(
        String(36),
        ForeignKey("student_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    job_id = Column(
        String(36),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status = Column(
        SQLAEnum(
            ApplicationStatusEnum,
            name="application_status_enum",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=ApplicationStatusEnum.applied,
    )
    resume_url = Column(String(500), nullable=False)
    cover_letter = Column(Text, nullable=True)
    # [{"status": "applied", "updated_at": "<iso8601>"}, ...], oldest first
    decision_history = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=get_now_utc, index=True)
    updated_at = Column(
        DateTime(timezone=True),
        default=get_now_utc,
        onupdate=get_now_utc,
    )

    student = relationship("StudentProfile", back_populates="applications", lazy="selectin")
    job = relationship("Job", back_populates="applications", lazy="selectin")

    # one application per student per job
    __table_args__ = (
        UniqueConstraint("student_id", "job_id", name="uq_applications_student_job"),
    )

    def __str__(self):
        return f"{self.id} - {self.status.value if self.status else ''}"
