from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from app.core.datetime_utils import get_now_utc
from app.models.base import Base, generate_uuid


class CompanyProfile(Base):
    __tablename__ = "company_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    company_name = Column(String(150), nullable=False)
    hr_email = Column(String(255), nullable=False)
    hr_mobile_number = Column(String(20), nullable=False)
    website = Column(String(255), nullable=True)
    industry = Column(String(100), nullable=True)
    headquarters = Column(String(150), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=get_now_utc)
    updated_at = Column(
        DateTime(timezone=True),
        default=get_now_utc,
        onupdate=get_now_utc,
    )

    user = relationship("User", back_populates="company_profile")
    jobs = relationship(
        "Job",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __str__(self):
        return self.company_name
