"""
Test data factories for generating test objects.

This module provides Factory Boy factories for creating test data objects
with realistic default values and easy customization. Factories only add
objects to the session; the async helpers below commit them.
"""

from datetime import timedelta
from typing import Iterable, Optional

import factory
from factory.alchemy import SQLAlchemyModelFactory

from app.domains.lifecycle.checklist import CHECKLIST_FIELDS, template_items
from models import ChecklistKey, Priority, Project, ProjectStage, Tenant, User, UserRole
from models.base import utcnow


def completed(items: list[dict]) -> list[dict]:
    """Copy of a checklist with every item ticked."""
    return [{**item, "completed": True} for item in items]


class TenantFactory(SQLAlchemyModelFactory):
    """Factory for creating Tenant test instances."""

    class Meta:
        model = Tenant
        sqlalchemy_session = None  # Will be set at runtime
        sqlalchemy_session_persistence = None

    name = factory.Sequence(lambda n: f"Studio {n}")


class UserFactory(SQLAlchemyModelFactory):
    """Factory for creating User test instances."""

    class Meta:
        model = User
        sqlalchemy_session = None  # Will be set at runtime
        sqlalchemy_session_persistence = None

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    role = UserRole.DESIGNER
    is_active = True
    # tenant_id will be passed when creating the user


class ProjectFactory(SQLAlchemyModelFactory):
    """Factory for creating Project test instances."""

    class Meta:
        model = Project
        sqlalchemy_session = None  # Will be set at runtime
        sqlalchemy_session_persistence = None

    name = factory.Sequence(lambda n: f"Website Build {n}")
    client_name = factory.Faker("company")
    scope = factory.Faker("sentence", nb_words=8)
    priority = Priority.MEDIUM
    stage = ProjectStage.UPCOMING
    overall_deadline = factory.LazyFunction(lambda: utcnow() + timedelta(days=30))
    current_deadline = factory.LazyAttribute(lambda obj: obj.overall_deadline)
    design_checklist = factory.LazyFunction(lambda: template_items(ChecklistKey.DESIGN))
    dev_checklist = factory.LazyFunction(lambda: template_items(ChecklistKey.DEV))
    qa_checklist = factory.LazyFunction(lambda: template_items(ChecklistKey.QA))
    final_checklist = factory.LazyFunction(lambda: template_items(ChecklistKey.FINAL))
    qa_fail_count = 0
    # tenant_id and lead ids will be passed when creating the project


# Utility functions for creating test data
async def create_tenant(session, **kwargs) -> Tenant:
    TenantFactory._meta.sqlalchemy_session = session
    tenant = TenantFactory.create(**kwargs)
    await session.commit()
    return tenant


async def create_user(session, tenant_id, role: UserRole, **kwargs) -> User:
    UserFactory._meta.sqlalchemy_session = session
    user = UserFactory.create(tenant_id=tenant_id, role=role, **kwargs)
    await session.commit()
    return user


async def create_project(
    session,
    tenant_id,
    stage: ProjectStage = ProjectStage.UPCOMING,
    designer: Optional[User] = None,
    dev_manager: Optional[User] = None,
    qa: Optional[User] = None,
    complete: Iterable[ChecklistKey] = (),
    **kwargs,
) -> Project:
    """Create a project directly in ``stage`` with the given checklists already ticked."""
    ProjectFactory._meta.sqlalchemy_session = session

    for key in complete:
        kwargs.setdefault(CHECKLIST_FIELDS[key], completed(template_items(key)))

    project = ProjectFactory.create(
        tenant_id=tenant_id,
        stage=stage,
        assigned_designer_id=designer.id if designer else None,
        assigned_dev_manager_id=dev_manager.id if dev_manager else None,
        assigned_qa_id=qa.id if qa else None,
        **kwargs,
    )
    await session.commit()
    return project
