"""
Soft-delete aware managers and querysets.
Implements active/inactive filtering and the reference-data ordering rules.
"""

from django.db import models
from django.db.models import Count
from django.db.models.functions import Lower


class SoftDeleteQuerySet(models.QuerySet):
    """
    QuerySet with soft-delete filtering helpers.
    """

    def active(self):
        """Filter for records that have not been soft-deleted."""
        return self.filter(is_active=True)


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """
    Manager that hides soft-deleted records by default.
    """

    def get_queryset(self):
        """Return queryset excluding soft-deleted records."""
        return super().get_queryset().active()


class AllObjectsManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """
    Unfiltered manager, including soft-deleted records.

    Services use this when an inactive record must still be found
    (idempotent deactivation, party lookups by id).
    """


class ReferenceQuerySet(models.QuerySet):
    """
    QuerySet for curated reference tables (body types, vehicle types).
    """

    def active(self):
        return self.filter(is_active=True)

    def alphabetical(self):
        """Case-insensitive name order; id breaks ties so the order is stable."""
        return self.order_by(Lower('name'), 'id')

    def with_vehicle_count(self):
        return self.annotate(vehicle_count=Count('vehicles'))


class ReferenceManager(models.Manager.from_queryset(ReferenceQuerySet)):
    """
    Manager for read-only reference data.
    """

    def listing(self):
        """Active rows in display order."""
        return self.get_queryset().active().alphabetical()


class VehicleQuerySet(SoftDeleteQuerySet):
    """
    Vehicle-specific query helpers.
    """

    def owned_by(self, owner):
        """Vehicles whose owner matches the given ``Owner`` value."""
        return self.filter(**owner.lookup())

    def with_catalog(self):
        return self.select_related('body_type', 'vehicle_type', 'client', 'customer')


class VehicleManager(models.Manager.from_queryset(VehicleQuerySet)):
    """
    Unfiltered vehicle manager; call ``.active()`` for the ledger view.
    """


class StickerQuerySet(SoftDeleteQuerySet):
    """
    Sticker listing helpers.
    """

    def with_policy(self):
        return self.select_related(
            'policy', 'policy__vehicle', 'policy__client', 'policy__customer', 'stock',
        )

    def newest_first(self):
        return self.order_by('-created_at', '-id')


class StickerManager(models.Manager.from_queryset(StickerQuerySet)):
    """
    Unfiltered sticker manager.
    """
