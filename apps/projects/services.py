"""
Service layer for projects app.

Services:
- create_project: Create a project with its creator as owner
- add_member: Add an employee to a project (idempotent)
- remove_member: Remove an employee from a project
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from .models import Project, ProjectMember

logger = logging.getLogger(__name__)


def create_project(name, creator, department=None, description='',
                   start_date=None, end_date=None):
    """
    Create a project and register the creator as its owner.

    Args:
        name: Project name (required)
        creator: User creating the project
        department: Department (defaults to the creator's)
        description: Optional description
        start_date: Optional start date
        end_date: Optional end date

    Returns:
        Created Project instance

    Raises:
        ValidationError: If name or department is missing, or dates are reversed
    """
    if not name or not name.strip():
        raise ValidationError("Project name is required.")

    department = department or creator.department
    if department is None:
        raise ValidationError(f"User {creator.get_full_name()} is not assigned to any department.")

    if start_date and end_date and end_date < start_date:
        raise ValidationError("Project end date cannot be before its start date.")

    with transaction.atomic():
        project = Project.objects.create(
            name=name.strip(),
            description=description.strip() if description else '',
            department=department,
            creator=creator,
            start_date=start_date,
            end_date=end_date,
        )
        ProjectMember.objects.create(
            project=project,
            employee=creator,
            role=ProjectMember.Role.OWNER,
        )

    logger.info(f'Project "{project.name}" created by {creator.email}')
    return project


def add_member(project, employee, role=ProjectMember.Role.MEMBER):
    """Add employee to project. Returns (membership, created)."""
    return ProjectMember.objects.get_or_create(
        project=project,
        employee=employee,
        defaults={'role': role},
    )


def remove_member(project, employee):
    """
    Remove employee from project.

    Returns:
        bool: True if a membership was removed

    Raises:
        ValidationError: If the employee is the project's owner
    """
    membership = ProjectMember.objects.filter(project=project, employee=employee).first()
    if membership is None:
        return False
    if membership.role == ProjectMember.Role.OWNER:
        raise ValidationError("The project owner cannot be removed.")
    membership.delete()
    return True
