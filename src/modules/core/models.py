"""Base abstract models for the product catalogue.

Provides:
- ``BaseModel``: UUIDv7 primary key + created_on / updated_on timestamps.
- ``SoftDeleteModel``: Extends BaseModel with soft-delete via ``is_active``.

Design decisions:
- Timestamps are plain fields, not ``auto_now``: the service layer stamps
  ``created_on`` and ``updated_on`` with the *same* instant on creation, and
  ``touch()`` guarantees ``updated_on`` moves forward on every mutation.
- ``objects`` manager returns ALL records (unfiltered).  Use ``.active()``
  explicitly to exclude soft-deleted rows.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import uuid6
from django.db import models
from django.utils import timezone

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_on = models.DateTimeField(editable=False)
    updated_on = models.DateTimeField()

    class Meta:
        abstract = True

    def stamp_created(self) -> datetime:
        """Set both timestamps to the same instant."""
        now = timezone.now()
        self.created_on = now
        self.updated_on = now
        return now

    def touch(self) -> datetime:
        """Refresh ``updated_on``, strictly later than its previous value."""
        now = timezone.now()
        previous = self.updated_on or self.created_on
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        self.updated_on = now
        return now

    def save(self, *args, **kwargs) -> None:
        """Fill missing timestamps and keep ``updated_on`` in ``update_fields``."""
        if self.created_on is None:
            self.stamp_created()
        elif self.updated_on is None:
            self.updated_on = self.created_on
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_on" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_on"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Soft Delete infrastructure
# ---------------------------------------------------------------------------


class SoftDeleteQuerySet(models.QuerySet):
    """QuerySet with soft-delete helpers."""

    def active(self) -> SoftDeleteQuerySet:
        """Return only records that have not been soft-deleted."""
        return self.filter(is_active=True)

    def inactive(self) -> SoftDeleteQuerySet:
        """Return only soft-deleted records."""
        return self.filter(is_active=False)


class SoftDeleteManager(models.Manager):
    """Manager that exposes ``.active()`` / ``.inactive()`` on the queryset."""

    def get_queryset(self) -> SoftDeleteQuerySet:
        return SoftDeleteQuerySet(self.model, using=self._db)

    def active(self) -> SoftDeleteQuerySet:
        return self.get_queryset().active()

    def inactive(self) -> SoftDeleteQuerySet:
        return self.get_queryset().inactive()


class SoftDeleteModel(BaseModel):
    """Abstract model with soft-delete via an ``is_active`` flag.

    - ``objects`` is **unfiltered** (returns all rows).
    - Use ``Model.objects.active()`` to exclude soft-deleted rows.
    - Rows are never physically removed; ``deactivate()`` flips the flag
      in memory and the caller persists it.
    """

    is_active = models.BooleanField(default=True, db_index=True)

    objects = SoftDeleteManager()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        """Computed: ``True`` when the record has been soft-deleted."""
        return not self.is_active

    def deactivate(self) -> None:
        """Mark inactive and refresh ``updated_on`` (does not save)."""
        self.is_active = False
        self.touch()
