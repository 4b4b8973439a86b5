"""
Reference catalog models.

Body types and vehicle types are curated outside this system and only read
here. Rows may be deactivated later without affecting vehicles that already
point at them.
"""

from django.db import models
from .base import ReferenceModel


class BodyType(ReferenceModel):
    """Vehicle body shape (Sedan, SUV, Van...)."""

    class Meta:
        verbose_name = 'Body Type'
        verbose_name_plural = 'Body Types'
        indexes = [
            models.Index(fields=['is_active', 'name'], name='core_bodyty_is_acti_5b1c2e_idx'),
        ]


class VehicleType(ReferenceModel):
    """Usage classification of a vehicle (Passenger Vehicle, Goods Carrier...)."""

    class Meta:
        verbose_name = 'Vehicle Type'
        verbose_name_plural = 'Vehicle Types'
        indexes = [
            models.Index(fields=['is_active', 'name'], name='core_vehicl_is_acti_8e2f41_idx'),
        ]
