"""Shared fixtures: departments, employees, chats and tasks."""

import itertools

import pytest


@pytest.fixture
def department(db):
    from apps.departments.models import Department
    return Department.objects.create(name='Engineering')


@pytest.fixture
def make_user(db, department):
    """Factory for employees in the default department."""
    from apps.accounts.models import User

    sequence = itertools.count(1)

    def _make(**kwargs):
        n = next(sequence)
        kwargs.setdefault('email', f'user{n}@example.com')
        kwargs.setdefault('first_name', f'User{n}')
        kwargs.setdefault('last_name', 'Test')
        kwargs.setdefault('department', department)
        return User.objects.create_user(password='secret', **kwargs)

    return _make


@pytest.fixture
def user(make_user):
    return make_user(first_name='Ivan', last_name='Ivanov')


@pytest.fixture
def other_user(make_user):
    return make_user(first_name='Anna', last_name='Petrova')


@pytest.fixture
def admin_employee(make_user):
    from apps.accounts.models import User
    return make_user(first_name='Olga', last_name='Admin', role=User.Role.ADMIN)


@pytest.fixture
def make_chat(db):
    """Factory for a chat with the given members."""
    from apps.chat.models import Chat, ChatMembership

    def _make(*members, name='General', **kwargs):
        chat = Chat.objects.create(
            name=name,
            created_by=members[0] if members else None,
            **kwargs,
        )
        for member in members:
            ChatMembership.objects.create(chat=chat, user=member)
        return chat

    return _make


@pytest.fixture
def make_task(db, department, user):
    """Factory for tasks saved directly, bypassing the service layer."""
    from apps.tasks.models import Task

    def _make(**kwargs):
        kwargs.setdefault('title', 'Check the mailbox')
        kwargs.setdefault('creator', user)
        kwargs.setdefault('assignee', user)
        kwargs.setdefault('department', department)
        return Task.objects.create(**kwargs)

    return _make


@pytest.fixture
def live_registry():
    """The process-wide listener registry, emptied after the test."""
    from apps.chat.registry import registry

    yield registry
    registry.unmount_all()
