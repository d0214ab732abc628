import pytest

from app.core.exceptions import Forbidden
from app.domains.applications.actors import AdminActor, ApplicationScope, CompanyActor, StudentActor
from app.models.users import UserRole
from tests.conftest import FakeJobRepository, make_application, make_job, make_student, make_user, new_id


@pytest.mark.asyncio
async def test_student_scope_is_own_profile(student_actor):
    scope = await student_actor.scope(FakeJobRepository())

    assert scope == ApplicationScope(student_id=student_actor.student_profile_id)


@pytest.mark.asyncio
async def test_student_without_profile_has_no_scope():
    with pytest.raises(Forbidden):
        await StudentActor(user_id=new_id()).scope(FakeJobRepository())


@pytest.mark.asyncio
async def test_company_scope_is_its_job_ids(company_actor, company, other_company):
    own = [make_job(company), make_job(company)]
    jobs = FakeJobRepository([*own, make_job(other_company)])

    scope = await company_actor.scope(jobs)

    assert scope.student_id is None
    assert sorted(scope.job_ids) == sorted(job.id for job in own)


@pytest.mark.asyncio
async def test_company_without_jobs_sees_nothing(company_actor):
    scope = await company_actor.scope(FakeJobRepository())

    assert scope.job_ids == []


@pytest.mark.asyncio
async def test_admin_scope_is_unrestricted(admin_actor):
    assert await admin_actor.scope(FakeJobRepository()) == ApplicationScope()


def test_roles():
    assert StudentActor(user_id="u").role == UserRole.student
    assert CompanyActor(user_id="u").role == UserRole.company
    assert AdminActor(user_id="u").role == UserRole.admin


def test_only_students_with_profile_may_apply(company_actor, admin_actor, student_actor):
    assert student_actor.require_student_profile() == student_actor.student_profile_id
    with pytest.raises(Forbidden):
        company_actor.require_student_profile()
    with pytest.raises(Forbidden):
        admin_actor.require_student_profile()


def test_status_change_authorization(company_actor, admin_actor, student_actor, student, company, other_company):
    own = make_application(student, make_job(company))
    foreign = make_application(make_student(make_user()), make_job(other_company))

    company_actor.authorize_status_change(own)
    admin_actor.authorize_status_change(foreign)
    with pytest.raises(Forbidden):
        company_actor.authorize_status_change(foreign)
    with pytest.raises(Forbidden):
        student_actor.authorize_status_change(own)


def test_view_authorization(student_actor, company_actor, student, job):
    mine = make_application(student, job)
    theirs = make_application(make_student(make_user()), job)

    student_actor.authorize_view(mine)
    company_actor.authorize_view(theirs)
    with pytest.raises(Forbidden):
        student_actor.authorize_view(theirs)
