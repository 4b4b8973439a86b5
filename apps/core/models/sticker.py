"""
Sticker and sticker stock models.

A sticker is the physical proof of cover issued against a policy. Its
status tag and its active flag are independent: deactivating a sticker
never touches the status, and no status change reactivates it.
"""

import uuid

from django.db import models
from simple_history.models import HistoricalRecords
from auditlog.registry import auditlog
from apps.core.managers import StickerManager
from .base import BaseModel


class StickerStatus(models.TextChoices):
    AVAILABLE = 'AVAILABLE', 'Available'
    ISSUED = 'ISSUED', 'Issued'
    VOIDED = 'VOIDED', 'Voided'
    EXPIRED = 'EXPIRED', 'Expired'


class StickerStock(models.Model):
    """
    Inventory entry a sticker's physical number is drawn from.
    Curated by stock management; read-only here.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    serial_number = models.CharField(max_length=100, unique=True)
    received_at = models.DateTimeField(null=True, blank=True)
    issued_at = models.DateTimeField(null=True, blank=True)
    valid_from = models.DateField(null=True, blank=True)
    valid_to = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = 'Sticker Stock'
        verbose_name_plural = 'Sticker Stock'
        ordering = ['serial_number']

    def __str__(self):
        return self.serial_number


class Sticker(BaseModel):
    """
    Insurance sticker issued against a policy.

    **Business Rules:**
    - Sticker number is unique
    - Always attached to a policy
    - Deactivation (soft delete) is terminal
    - created_at never changes; updated_at strictly increases
    """

    sticker_no = models.CharField(
        max_length=100,
        unique=True,
        help_text="Printed sticker number"
    )

    status = models.CharField(
        max_length=20,
        choices=StickerStatus.choices,
        default=StickerStatus.ISSUED,
        db_index=True,
    )

    policy = models.ForeignKey(
        'Policy',
        on_delete=models.PROTECT,
        related_name='stickers',
    )

    stock = models.ForeignKey(
        'StickerStock',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='stickers',
    )

    objects = StickerManager()
    all_objects = StickerManager()

    history = HistoricalRecords()

    class Meta:
        verbose_name = 'Sticker'
        verbose_name_plural = 'Stickers'
        ordering = ['-created_at']
        base_manager_name = 'all_objects'
        indexes = [
            models.Index(fields=['is_active', 'created_at'], name='core_sticke_is_acti_9c3b07_idx'),
        ]

    def __str__(self):
        return self.sticker_no


# Register for audit logging
auditlog.register(Sticker)
