"""
Policy model for the sticker registry.

Represents insurance policies covering vehicles.
"""

from django.db import models
from django.core.exceptions import ValidationError
from simple_history.models import HistoricalRecords
from auditlog.registry import auditlog
from .base import BaseModel
from .party import Owner


class Policy(BaseModel):
    """
    Insurance policy covering a vehicle.

    **CRITICAL Business Rules:**
    - Covers exactly one vehicle
    - The policy's party is ALWAYS the vehicle's current owner; it is
      copied from the vehicle, never chosen independently
    - valid_to must be after valid_from
    - Policy number unique among active policies
    """

    STATUS_PENDING = 'PENDING'
    STATUS_ACTIVE = 'ACTIVE'
    STATUS_EXPIRED = 'EXPIRED'
    STATUS_CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_EXPIRED, 'Expired'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    policy_no = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Policy number"
    )

    valid_from = models.DateField(help_text="Cover start date")
    valid_to = models.DateField(help_text="Cover end date")

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )

    vehicle = models.ForeignKey(
        'Vehicle',
        on_delete=models.PROTECT,
        related_name='policies',
        help_text="Vehicle covered by this policy"
    )

    # Denormalized from vehicle owner
    client = models.ForeignKey(
        'Client',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='policies',
    )

    customer = models.ForeignKey(
        'Customer',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='policies',
    )

    history = HistoricalRecords()

    class Meta:
        verbose_name = 'Policy'
        verbose_name_plural = 'Policies'
        ordering = ['-created_at']
        base_manager_name = 'all_objects'
        indexes = [
            models.Index(fields=['vehicle', 'status'], name='core_policy_vehicle_6f0d12_idx'),
            models.Index(fields=['client'], name='core_policy_client__0b9e77_idx'),
            models.Index(fields=['customer'], name='core_policy_custome_c52a18_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(valid_to__gt=models.F('valid_from')),
                name='policy_valid_to_after_valid_from'
            ),
            models.CheckConstraint(
                condition=(
                    (models.Q(client__isnull=False) & models.Q(customer__isnull=True)) |
                    (models.Q(client__isnull=True) & models.Q(customer__isnull=False))
                ),
                name='policy_has_exactly_one_party'
            ),
            models.UniqueConstraint(
                fields=['policy_no'],
                condition=models.Q(is_active=True),
                name='unique_active_policy_no'
            ),
        ]

    def __str__(self):
        return f"Policy {self.policy_no}"

    @property
    def owner(self):
        """The insured party as an ``Owner`` value."""
        return Owner.read_from(self)

    def sync_owner_from_vehicle(self):
        """Copy the vehicle's owner onto this policy."""
        self.vehicle.owner.assign_to(self)

    def clean(self):
        """
        Validate the party reference against the vehicle owner.
        """
        super().clean()
        if self.vehicle_id and self.owner != self.vehicle.owner:
            raise ValidationError({
                'vehicle': "Policy party must match the vehicle's owner."
            })


# Register for audit logging
auditlog.register(Policy)
