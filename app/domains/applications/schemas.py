from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from app.core.pagination import PaginationMeta
from app.models.applications import ApplicationStatusEnum

_http_url = TypeAdapter(HttpUrl)

# clients send and receive camelCase; snake_case names are accepted too
CAMEL_CASE = ConfigDict(alias_generator=to_camel, populate_by_name=True)
CAMEL_CASE_FROM_ORM = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApplicationDecisionEnum(str, Enum):
    """Statuses a reviewer may move an application to"""
    shortlisted = "shortlisted"
    rejected = "rejected"
    selected = "selected"


class ApplicationCreate(BaseModel):
    """Student submission for a job"""
    model_config = CAMEL_CASE

    job_id: str = Field(..., min_length=1, description="Job to apply for")
    resume_url: str = Field(..., description="Public link to the resume PDF")
    cover_letter: Optional[str] = Field(default=None, description="Optional cover letter")

    @field_validator("resume_url")
    @classmethod
    def validate_resume_url(cls, value: str) -> str:
        value = value.strip()
        try:
            _http_url.validate_python(value)
        except ValidationError:
            raise ValueError("Resume must be a valid http(s) URL")
        if not value.lower().endswith(".pdf"):
            raise ValueError("Resume must be a PDF link")
        return value

    @field_validator("cover_letter")
    @classmethod
    def blank_cover_letter_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationDecisionEnum = Field(..., description="New application status")


class DecisionHistoryEntry(BaseModel):
    model_config = CAMEL_CASE

    status: ApplicationStatusEnum
    updated_at: datetime


class StudentUserSummary(BaseModel):
    id: str
    full_name: str
    email: str

    model_config = CAMEL_CASE_FROM_ORM


class StudentSummary(BaseModel):
    id: str
    course: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[int] = None
    user: Optional[StudentUserSummary] = None

    model_config = CAMEL_CASE_FROM_ORM


class CompanySummary(BaseModel):
    id: str
    company_name: str
    industry: Optional[str] = None
    website: Optional[str] = None

    model_config = CAMEL_CASE_FROM_ORM


class JobSummary(BaseModel):
    id: str
    title: str
    location: Optional[str] = None
    package_lpa: Optional[float] = None
    deadline: datetime
    is_active: bool
    company: Optional[CompanySummary] = None

    model_config = CAMEL_CASE_FROM_ORM


class ApplicationRead(BaseModel):
    id: str
    student_id: str
    job_id: str
    status: ApplicationStatusEnum
    resume_url: str
    cover_letter: Optional[str] = None
    decision_history: List[DecisionHistoryEntry] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = CAMEL_CASE_FROM_ORM


class ApplicationDetail(ApplicationRead):
    """Application with applicant and job summaries"""
    student: Optional[StudentSummary] = None
    job: Optional[JobSummary] = None


class ApplicationListResponse(BaseModel):
    model_config = CAMEL_CASE

    items: List[ApplicationDetail]
    pagination: PaginationMeta


class ApplyResponse(BaseModel):
    id: str
    message: str
