from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship

from app.core.datetime_utils import get_now_utc
from app.models.base import Base, generate_uuid


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    mobile_number = Column(String(20), nullable=False)
    course = Column(String(100), nullable=False)
    branch = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)  # 1 ~ 6
    skills = Column(JSON, nullable=False, default=list)
    resume_url = Column(String(500), nullable=True)  # latest uploaded resume
    created_at = Column(DateTime(timezone=True), default=get_now_utc)
    updated_at = Column(
        DateTime(timezone=True),
        default=get_now_utc,
        onupdate=get_now_utc,
    )

    user = relationship("User", back_populates="student_profile", lazy="selectin")
    applications = relationship(
        "Application",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __str__(self):
        return f"{self.course} / {self.branch} ({self.id})"
