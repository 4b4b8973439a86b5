"""
Base abstract models for the sticker registry.

These models provide common functionality for all domain models:
- Audit tracking (who created/modified)
- Monotonic timestamps
- Irreversible soft delete
"""

from datetime import timedelta
import uuid

from django.db import models, router, transaction
from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.core.managers import SoftDeleteManager, AllObjectsManager, ReferenceManager

TIMESTAMP_STEP = timedelta(microseconds=1)


def next_timestamp(previous=None):
    """
    Return ``now``, or one tick past ``previous`` when the clock has not
    moved beyond it. Successive values are strictly increasing.
    """
    now = timezone.now()
    if previous is not None and now <= previous:
        return previous + TIMESTAMP_STEP
    return now


class TrackedModel(models.Model):
    """
    Checks every write against the stored row.

    Subclasses list the columns they guard in ``tracked_fields`` and adjust
    the instance in ``apply_stored_state``. On update the stored values are
    read under a row lock in the same transaction as the write, so the
    rules hold for stale or refreshed instances alike.
    """

    tracked_fields = ()

    class Meta:
        abstract = True

    @classmethod
    def tracked_field_names(cls):
        names = []
        for klass in cls.__mro__:
            for name in vars(klass).get('tracked_fields', ()):
                if name not in names:
                    names.append(name)
        return names

    def stored_values(self, using):
        """Stored values of the tracked fields, or None when the row is gone."""
        return (
            type(self)._base_manager.using(using)
            .select_for_update()
            .filter(pk=self.pk)
            .values(*self.tracked_field_names())
            .first()
        )

    def apply_stored_state(self, stored, update_fields):
        """
        Hook run right before the row is written.

        ``stored`` is None for inserts. Returns the ``update_fields`` to
        write with.
        """
        return update_fields

    def save(self, *args, **kwargs):
        if self._state.adding or not self.tracked_field_names():
            kwargs['update_fields'] = self.apply_stored_state(None, kwargs.get('update_fields'))
            super().save(*args, **kwargs)
            return

        using = kwargs.get('using') or router.db_for_write(type(self), instance=self)
        with transaction.atomic(using=using):
            stored = self.stored_values(using)
            kwargs['update_fields'] = self.apply_stored_state(stored, kwargs.get('update_fields'))
            super().save(*args, **kwargs)


class AuditableModel(TrackedModel):
    """
    Abstract base model for audit tracking.

    **Tracks:**
    - Who created the record
    - When it was created (set once, never changes)
    - Who last modified it
    - When it was last modified (strictly increases on every save)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)s_created_set',
        help_text="User who created this record"
    )

    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)s_updated_set',
        help_text="User who last updated this record"
    )

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now, editable=False)

    tracked_fields = ('created_at', 'updated_at')

    class Meta:
        abstract = True

    def apply_stored_state(self, stored, update_fields):
        """
        Stamp timestamps before writing.

        ``created_at`` keeps the stored value; ``updated_at`` always moves
        past the stored value and is always part of ``update_fields``.
        """
        if self._state.adding:
            now = timezone.now()
            self.created_at = now
            self.updated_at = now
        else:
            previous = self.updated_at
            if stored is not None:
                self.created_at = stored['created_at']
                previous = stored['updated_at']
            self.updated_at = next_timestamp(previous)
            if update_fields is not None:
                update_fields = set(update_fields) | {'updated_at'}
        return super().apply_stored_state(stored, update_fields)


class SoftDeleteModel(TrackedModel):
    """
    Abstract base model for soft delete support.

    **How it works:**
    - Instead of DELETE, we set is_active=False and stamp deleted_at
    - Default manager filters out deleted records; ``all_objects`` does not
    - Deletion is terminal: a deleted record is never reactivated
    """

    is_active = models.BooleanField(default=True, db_index=True)

    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp when record was soft-deleted"
    )

    objects = SoftDeleteManager()
    all_objects = AllObjectsManager()

    tracked_fields = ('is_active', 'deleted_at')

    class Meta:
        abstract = True
        base_manager_name = 'all_objects'

    def apply_stored_state(self, stored, update_fields):
        if stored is not None and not stored['is_active']:
            if self.is_active:
                raise ValidationError(
                    f"{self._meta.verbose_name.capitalize()} has been deleted and cannot be reactivated"
                )
            self.deleted_at = stored['deleted_at']
        elif self.is_active:
            self.deleted_at = None
        else:
            # Going inactive: deleted_at shares the instant of updated_at.
            if not self._state.adding or self.deleted_at is None:
                self.deleted_at = getattr(self, 'updated_at', None) or timezone.now()
            if update_fields is not None:
                update_fields = set(update_fields) | {'is_active', 'deleted_at'}
        return super().apply_stored_state(stored, update_fields)

    def soft_delete(self, extra_fields=()):
        """
        Soft delete this record in a single row write.

        deleted_at and updated_at receive the same instant. No-op when the
        stored row is already deleted; the instance then takes the stored
        values and the original deleted_at is kept.
        """
        using = self._state.db or router.db_for_write(type(self), instance=self)
        with transaction.atomic(using=using):
            stored = self.stored_values(using)
            if stored is not None and not stored['is_active']:
                for name, value in stored.items():
                    setattr(self, name, value)
                return False
            self.is_active = False
            self.save(using=using, update_fields=['is_active', 'deleted_at', *extra_fields])
        return True

    @property
    def is_deleted(self):
        """Check if record is soft-deleted."""
        return not self.is_active


class BaseModel(AuditableModel, SoftDeleteModel):
    """
    Base model combining audit tracking and soft delete.

    Domain models that are mutated by the core inherit from this:
    ```python
    class Vehicle(BaseModel):
        registration_no = models.CharField(max_length=50)
    ```
    """

    class Meta:
        abstract = True
        base_manager_name = 'all_objects'


class ReferenceModel(models.Model):
    """
    Abstract base for externally curated lookup tables.

    The core only reads these; ``is_active`` may flip either way upstream.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReferenceManager()

    class Meta:
        abstract = True

    def __str__(self):
        return self.name
