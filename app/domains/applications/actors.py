"""
Request-scoped callers of the application lifecycle.

Every lifecycle operation receives one of three actor variants. Each variant
decides for itself which applications it may list, view and move through the
decision pipeline, so the service never branches on role strings.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Optional, Protocol, Sequence

from app.core.exceptions import Forbidden
from app.models.users import UserRole


class JobRegistry(Protocol):
    async def find_job_ids_by_company(self, company_id: str) -> Sequence[str]: ...


@dataclass(frozen=True)
class ApplicationScope:
    """Restriction applied to application listings; None means unrestricted."""
    student_id: Optional[str] = None
    job_ids: Optional[Sequence[str]] = None


@dataclass(frozen=True)
class Actor(ABC):
    user_id: str

    role: ClassVar[UserRole]

    @abstractmethod
    async def scope(self, job_registry: JobRegistry) -> ApplicationScope:
        """Listing restriction for this actor."""

    @abstractmethod
    def authorize_view(self, application) -> None:
        """Raise Forbidden if the actor may not read the application."""

    @abstractmethod
    def authorize_status_change(self, application) -> None:
        """Raise Forbidden if the actor may not change the application status."""

    def require_student_profile(self) -> str:
        raise Forbidden("Student profile required to apply")


@dataclass(frozen=True)
class StudentActor(Actor):
    student_profile_id: Optional[str] = None

    role: ClassVar[UserRole] = UserRole.student

    def require_student_profile(self) -> str:
        if self.student_profile_id is None:
            raise Forbidden("Student profile required to apply")
        return self.student_profile_id

    async def scope(self, job_registry: JobRegistry) -> ApplicationScope:
        if self.student_profile_id is None:
            raise Forbidden("Student profile not found")
        return ApplicationScope(student_id=self.student_profile_id)

    def authorize_view(self, application) -> None:
        if self.student_profile_id is None or application.student_id != self.student_profile_id:
            raise Forbidden()

    def authorize_status_change(self, application) -> None:
        raise Forbidden()


@dataclass(frozen=True)
class CompanyActor(Actor):
    company_profile_id: Optional[str] = None

    role: ClassVar[UserRole] = UserRole.company

    async def scope(self, job_registry: JobRegistry) -> ApplicationScope:
        if self.company_profile_id is None:
            raise Forbidden("Company profile not found")
        job_ids = await job_registry.find_job_ids_by_company(self.company_profile_id)
        return ApplicationScope(job_ids=list(job_ids))

    def authorize_view(self, application) -> None:
        # list() narrows companies to their own jobs; single reads stay open
        return None

    def authorize_status_change(self, application) -> None:
        if self.company_profile_id is None or application.job.company_id != self.company_profile_id:
            raise Forbidden()


@dataclass(frozen=True)
class AdminActor(Actor):
    role: ClassVar[UserRole] = UserRole.admin

    async def scope(self, job_registry: JobRegistry) -> ApplicationScope:
        return ApplicationScope()

    def authorize_view(self, application) -> None:
        return None

    def authorize_status_change(self, application) -> None:
        return None
