"""
Sticker lifecycle: issuance, listing and deactivation.

State machine for ``Sticker.is_active``::

    ACTIVE --deactivate--> INACTIVE   (terminal)

The status tag is independent of the active flag and is never changed by
deactivation.
"""

import logging

from django.db import transaction
from django.core.exceptions import ValidationError

from apps.core.exceptions import NotFound, ValidationViolation
from apps.core.models.sticker import Sticker, StickerStatus, StickerStock
from apps.core.storage import storage_operation
from .policy_service import fetch_policy

logger = logging.getLogger(__name__)


def _load_sticker(sticker_id, using, lock=False):
    qs = Sticker.all_objects.using(using)
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=sticker_id)
    except (Sticker.DoesNotExist, ValidationError, ValueError):
        logger.warning("Sticker %s not found", sticker_id)
        raise NotFound("Sticker not found") from None


@storage_operation
def issue_sticker(*, using, created_by=None, policy_id, sticker_no: str, stock_id=None) -> Sticker:
    """
    Issue a sticker against a policy.

    Rules:
    - Sticker number and policy are required.
    - Sticker number is unique across all stickers, deleted ones included.
    - The policy must be active and linked to a vehicle.
    - Stock, when given, must exist and be active.
    """
    sticker_no = (sticker_no or "").strip()
    if not sticker_no or not policy_id:
        raise ValidationViolation("Sticker number and policy are required")

    with transaction.atomic(using=using):
        if Sticker.all_objects.using(using).filter(sticker_no=sticker_no).exists():
            raise ValidationViolation(
                "Sticker number already exists",
                message_dict={'sticker_no': ["Sticker number already exists"]},
            )

        policy = fetch_policy(policy_id, using)
        if policy.is_deleted:
            raise ValidationViolation(
                "Policy is inactive",
                message_dict={'policy': ["Policy is inactive"]},
            )
        if not policy.vehicle_id:
            raise ValidationViolation(
                "Policy not linked to a vehicle",
                message_dict={'policy': ["Policy not linked to a vehicle"]},
            )

        stock = None
        if stock_id:
            try:
                stock = StickerStock.objects.using(using).get(pk=stock_id, is_active=True)
            except (StickerStock.DoesNotExist, ValidationError, ValueError):
                raise ValidationViolation(
                    "Sticker stock must exist and be active",
                    message_dict={'stock': ["Sticker stock must exist and be active"]},
                ) from None

        sticker = Sticker(
            sticker_no=sticker_no,
            status=StickerStatus.ISSUED,
            policy=policy,
            stock=stock,
            created_by=created_by,
            updated_by=created_by,
        )
        sticker.save(using=using)

    logger.info("Sticker %s issued for policy %s", sticker.sticker_no, policy.policy_no)
    return sticker


@storage_operation
def list_active_stickers(*, using, status=None, policy_id=None):
    """Active stickers, newest first, with policy, party and vehicle joined."""
    qs = Sticker.objects.using(using).active().with_policy().newest_first()
    if status:
        qs = qs.filter(status=status)
    if policy_id:
        try:
            qs = qs.filter(policy_id=policy_id)
        except ValidationError as exc:
            raise ValidationViolation.from_django(exc) from exc
    return list(qs)


@storage_operation
def get_sticker(sticker_id, *, using) -> Sticker:
    return _load_sticker(sticker_id, using)


@storage_operation
def deactivate_sticker(sticker_id, *, using, actor=None) -> Sticker:
    """
    Soft delete a sticker.

    The row is locked and written once: is_active=False, and deleted_at and
    updated_at set to the same instant. Status is left untouched.

    A second call on an already inactive sticker succeeds without writing
    and returns the stored record unchanged (same deleted_at, same
    updated_at).

    Raises:
        NotFound: no sticker with this id; nothing is written.
    """
    with transaction.atomic(using=using):
        sticker = _load_sticker(sticker_id, using, lock=True)
        if sticker.is_deleted:
            logger.info("Sticker %s already inactive; nothing to do", sticker.pk)
            return sticker
        sticker.updated_by = actor
        sticker.soft_delete(extra_fields=['updated_by'])

    logger.info("Sticker %s deactivated at %s", sticker.pk, sticker.deleted_at.isoformat())
    return sticker
