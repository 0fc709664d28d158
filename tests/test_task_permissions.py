"""
Task Permission Tests
=====================

Tests for who may edit a task.
"""

import uuid

from app.models import Task, UserType
from app.services.task_permissions import TaskEditPermissions

from conftest import USER_ID, make_activity, make_task, make_user


class TestHasTaskEditPermissions:
    """Tests for TaskEditPermissions.has_task_edit_permissions."""

    def setup_method(self):
        self.permissions = TaskEditPermissions()

    def test_denies_missing_task(self):
        assert not self.permissions.has_task_edit_permissions(None, make_user())

    def test_denies_missing_user(self):
        assert not self.permissions.has_task_edit_permissions(make_task(), None)

    def test_site_admin_can_edit_any_task(self):
        user = make_user(user_type=UserType.SITE_ADMIN)

        assert self.permissions.has_task_edit_permissions(make_task(), user)

    def test_denies_task_without_activity(self):
        task = Task(task_id=1, name="Orphan")

        assert not self.permissions.has_task_edit_permissions(task, make_user())

    def test_org_admin_of_managing_organization_can_edit(self):
        task = make_task(activity=make_activity(managing_organization_id=10))
        user = make_user(user_type=UserType.ORG_ADMIN, organization_id=10)

        assert self.permissions.has_task_edit_permissions(task, user)

    def test_org_admin_of_other_organization_cannot_edit(self):
        task = make_task(activity=make_activity(managing_organization_id=10))
        user = make_user(user_type=UserType.ORG_ADMIN, organization_id=11)

        assert not self.permissions.has_task_edit_permissions(task, user)

    def test_basic_user_in_managing_organization_cannot_edit(self):
        task = make_task(activity=make_activity(managing_organization_id=10))
        user = make_user(user_type=UserType.BASIC_USER, organization_id=10)

        assert not self.permissions.has_task_edit_permissions(task, user)

    def test_activity_organizer_can_edit(self):
        task = make_task(activity=make_activity(organizer_id=USER_ID))

        assert self.permissions.has_task_edit_permissions(task, make_user())

    def test_other_basic_user_cannot_edit(self):
        task = make_task(activity=make_activity(organizer_id=uuid.uuid4()))

        assert not self.permissions.has_task_edit_permissions(task, make_user())
