"""
Vehicle model for the sticker registry.

Represents vehicles owned by a client or a customer and covered by policies.
"""

from django.db import models
from django.core.exceptions import ValidationError
from simple_history.models import HistoricalRecords
from auditlog.registry import auditlog
from apps.core.managers import VehicleManager
from .base import BaseModel
from .party import Owner


class Vehicle(BaseModel):
    """
    Vehicle owned by exactly one party.

    **Business Rules:**
    - Owned by ONE client or ONE customer, never both, never neither
    - Body type and vehicle type reference the catalog (active at creation)
    - Registration number unique among active vehicles
    - Deactivation is a soft delete and is never undone
    - Full history tracked
    """

    registration_no = models.CharField(
        max_length=50,
        db_index=True,
        help_text="Vehicle registration/license plate number"
    )

    make = models.CharField(
        max_length=100,
        help_text="Vehicle manufacturer (e.g., Toyota, Honda)"
    )

    model = models.CharField(
        max_length=100,
        help_text="Vehicle model"
    )

    year = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Year of manufacture"
    )

    chassis_number = models.CharField(max_length=100, blank=True, db_index=True)
    engine_number = models.CharField(max_length=100, blank=True)

    # Catalog
    body_type = models.ForeignKey(
        'BodyType',
        on_delete=models.PROTECT,
        related_name='vehicles',
    )

    vehicle_type = models.ForeignKey(
        'VehicleType',
        on_delete=models.PROTECT,
        related_name='vehicles',
    )

    # Owner: exactly one of these is set, read through ``owner``
    client = models.ForeignKey(
        'Client',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='vehicles',
    )

    customer = models.ForeignKey(
        'Customer',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='vehicles',
    )

    # Unfiltered by default: the ledger must see deactivated vehicles too
    objects = VehicleManager()
    all_objects = VehicleManager()

    history = HistoricalRecords()

    class Meta:
        verbose_name = 'Vehicle'
        verbose_name_plural = 'Vehicles'
        ordering = ['-created_at']
        base_manager_name = 'all_objects'
        indexes = [
            models.Index(fields=['client', 'is_active'], name='core_vehicl_client__3d7a90_idx'),
            models.Index(fields=['customer', 'is_active'], name='core_vehicl_custome_a41c5b_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    (models.Q(client__isnull=False) & models.Q(customer__isnull=True)) |
                    (models.Q(client__isnull=True) & models.Q(customer__isnull=False))
                ),
                name='vehicle_has_exactly_one_owner'
            ),
            models.UniqueConstraint(
                fields=['registration_no'],
                condition=models.Q(is_active=True),
                name='unique_active_registration_no'
            ),
        ]

    def __str__(self):
        return f"{self.make} {self.model} ({self.registration_no})"

    @property
    def owner(self):
        """The owning party as an ``Owner`` value."""
        return Owner.read_from(self)

    @owner.setter
    def owner(self, value):
        value.assign_to(self)

    def clean(self):
        super().clean()
        if (self.client_id is None) == (self.customer_id is None):
            raise ValidationError({
                'client': 'A vehicle must belong to exactly one client or customer.'
            })

    def get_owner_party(self):
        """The Client or Customer instance owning this vehicle."""
        owner = self.owner
        return getattr(self, owner.kind.owner_field) if owner else None


# Register for audit logging
auditlog.register(Vehicle)
