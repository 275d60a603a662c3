"""Unit tests for BaseModel and SoftDeleteModel.

Uses concrete test models created via Django's SchemaEditor so we can
exercise the abstract classes against a real database.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from freezegun import freeze_time

from django.db import connection, models
from django.utils import timezone

from modules.core.models import BaseModel, SoftDeleteModel

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Concrete models for testing (abstract models can't be instantiated)
# ---------------------------------------------------------------------------


class ConcreteBaseModel(BaseModel):
    name = models.CharField(max_length=100)

    class Meta(BaseModel.Meta):
        app_label = "core"
        db_table = "test_concrete_base"


class ConcreteSoftDeleteModel(SoftDeleteModel):
    title = models.CharField(max_length=100)

    class Meta(SoftDeleteModel.Meta):
        app_label = "core"
        db_table = "test_concrete_soft_delete"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def _test_tables(django_db_setup, django_db_blocker):
    """Create DB tables for concrete test models (idempotent for --reuse-db)."""
    with django_db_blocker.unblock():
        with connection.schema_editor() as editor:
            existing = connection.introspection.table_names()
            if ConcreteBaseModel._meta.db_table not in existing:
                editor.create_model(ConcreteBaseModel)
            if ConcreteSoftDeleteModel._meta.db_table not in existing:
                editor.create_model(ConcreteSoftDeleteModel)


@pytest.fixture(autouse=True)
def _use_test_tables(_test_tables):
    """Ensure test tables exist for every test in this module."""


# ---------------------------------------------------------------------------
# BaseModel tests
# ---------------------------------------------------------------------------


class TestBaseModel:
    """UUIDv7 PK and timestamp behaviour."""

    def test_id_is_uuid_version_7(self):
        obj = ConcreteBaseModel.objects.create(name="test")
        assert isinstance(obj.id, uuid.UUID)
        assert obj.id.version == 7

    def test_ids_are_unique(self):
        a = ConcreteBaseModel.objects.create(name="a")
        b = ConcreteBaseModel.objects.create(name="b")
        assert a.id != b.id

    def test_save_fills_equal_timestamps_on_create(self):
        obj = ConcreteBaseModel.objects.create(name="test")
        obj.refresh_from_db()
        assert obj.created_on is not None
        assert obj.created_on == obj.updated_on

    @freeze_time("2025-06-15 12:00:00")
    def test_stamp_created_uses_current_instant(self):
        obj = ConcreteBaseModel(name="stamped")
        stamped = obj.stamp_created()
        assert stamped == timezone.now()
        assert obj.created_on == obj.updated_on == stamped

    def test_plain_save_does_not_move_updated_on(self):
        obj = ConcreteBaseModel.objects.create(name="original")
        original_updated = obj.updated_on
        obj.name = "modified"
        obj.save()
        obj.refresh_from_db()
        assert obj.updated_on == original_updated

    def test_touch_moves_updated_on_forward(self):
        obj = ConcreteBaseModel.objects.create(name="original")
        original_updated = obj.updated_on
        obj.touch()
        obj.save()
        obj.refresh_from_db()
        assert obj.updated_on > original_updated

    def test_touch_is_strictly_increasing_under_frozen_clock(self):
        with freeze_time("2025-06-15 12:00:00"):
            obj = ConcreteBaseModel.objects.create(name="frozen")
            first = obj.updated_on
            second = obj.touch()
            third = obj.touch()
        assert first < second < third
        assert second - first == timedelta(microseconds=1)

    def test_created_on_does_not_change_on_touch(self):
        obj = ConcreteBaseModel.objects.create(name="original")
        original_created = obj.created_on
        obj.touch()
        obj.save()
        obj.refresh_from_db()
        assert obj.created_on == original_created

    def test_save_with_update_fields_includes_updated_on(self):
        """The save() guard must inject updated_on into update_fields."""
        obj = ConcreteBaseModel.objects.create(name="original")
        original_updated = obj.updated_on
        obj.name = "modified"
        obj.touch()
        obj.save(update_fields=["name"])
        obj.refresh_from_db()
        assert obj.name == "modified"
        assert obj.updated_on > original_updated

    def test_id_and_created_on_not_editable(self):
        assert ConcreteBaseModel._meta.get_field("id").editable is False
        assert ConcreteBaseModel._meta.get_field("created_on").editable is False


# ---------------------------------------------------------------------------
# SoftDeleteModel tests
# ---------------------------------------------------------------------------


class TestSoftDeleteModel:
    """Soft delete via ``is_active`` and manager helpers."""

    def test_new_instance_is_active(self):
        obj = ConcreteSoftDeleteModel.objects.create(title="alive")
        assert obj.is_active is True
        assert obj.is_deleted is False

    def test_deactivate_clears_flag_and_touches(self):
        obj = ConcreteSoftDeleteModel.objects.create(title="to-delete")
        original_updated = obj.updated_on
        obj.deactivate()
        obj.save()
        obj.refresh_from_db()
        assert obj.is_active is False
        assert obj.is_deleted is True
        assert obj.updated_on > original_updated

    def test_deactivated_still_in_objects_all(self):
        """objects.all() returns ALL records, including soft-deleted."""
        obj = ConcreteSoftDeleteModel.objects.create(title="visible")
        obj.deactivate()
        obj.save()
        assert ConcreteSoftDeleteModel.objects.filter(pk=obj.pk).exists()

    def test_active_returns_only_active(self):
        alive = ConcreteSoftDeleteModel.objects.create(title="alive")
        dead = ConcreteSoftDeleteModel.objects.create(title="dead")
        dead.deactivate()
        dead.save()
        active_qs = ConcreteSoftDeleteModel.objects.active()
        assert active_qs.filter(pk=alive.pk).exists()
        assert not active_qs.filter(pk=dead.pk).exists()

    def test_inactive_returns_only_deactivated(self):
        alive = ConcreteSoftDeleteModel.objects.create(title="alive")
        dead = ConcreteSoftDeleteModel.objects.create(title="dead")
        dead.deactivate()
        dead.save()
        inactive_qs = ConcreteSoftDeleteModel.objects.inactive()
        assert inactive_qs.filter(pk=dead.pk).exists()
        assert not inactive_qs.filter(pk=alive.pk).exists()

    def test_queryset_helpers_chain(self):
        ConcreteSoftDeleteModel.objects.create(title="match")
        ConcreteSoftDeleteModel.objects.create(title="other")
        qs = ConcreteSoftDeleteModel.objects.filter(title="match").active()
        assert qs.count() == 1
