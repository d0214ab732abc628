from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.core.datetime_utils import get_now_utc
from app.models.base import Base, generate_uuid


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_id = Column(
        String(36),
        ForeignKey("company_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(150), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(150), nullable=False)
    package_lpa = Column(Float, nullable=False)  # lakhs per annum
    eligibility = Column(Text, nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=get_now_utc)
    updated_at = Column(
        DateTime(timezone=True),
        default=get_now_utc,
        onupdate=get_now_utc,
    )

    company = relationship("CompanyProfile", back_populates="jobs", lazy="selectin")
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __str__(self):
        return self.title
