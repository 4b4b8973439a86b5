import logging

from django.db import transaction
from django.core.exceptions import ValidationError

from apps.core.exceptions import NotFound, ValidationViolation
from apps.core.models.policy import Policy
from apps.core.models.vehicle import Vehicle
from apps.core.storage import storage_operation

logger = logging.getLogger(__name__)


def fetch_policy(policy_id, using):
    try:
        return Policy.all_objects.using(using).select_related('vehicle').get(pk=policy_id)
    except (Policy.DoesNotExist, ValidationError, ValueError):
        logger.warning("Policy %s not found", policy_id)
        raise NotFound("Policy not found") from None


@storage_operation
def create_policy(*, using, created_by=None, vehicle, policy_no: str, valid_from, valid_to,
                  status=Policy.STATUS_PENDING) -> Policy:
    """
    Create a policy for a vehicle.

    Rules:
    - The vehicle must exist and be active.
    - The insured party is copied from the vehicle's owner; callers cannot
      pick a different one.
    - valid_to must be after valid_from (DB constraint also enforces).
    - Policy number unique among active policies.
    """
    vehicle_id = getattr(vehicle, 'pk', vehicle)
    with transaction.atomic(using=using):
        try:
            vehicle = Vehicle.all_objects.using(using).get(pk=vehicle_id)
        except (Vehicle.DoesNotExist, ValidationError, ValueError):
            raise NotFound("Vehicle not found") from None
        if vehicle.is_deleted:
            raise ValidationViolation(
                "Cannot insure an inactive vehicle",
                message_dict={'vehicle': ["Cannot insure an inactive vehicle"]},
            )

        policy = Policy(
            vehicle=vehicle,
            policy_no=(policy_no or "").strip(),
            valid_from=valid_from,
            valid_to=valid_to,
            status=status,
            created_by=created_by,
            updated_by=created_by,
        )
        policy.sync_owner_from_vehicle()
        try:
            policy.full_clean()
        except ValidationError as exc:
            raise ValidationViolation.from_django(exc) from exc
        policy.save(using=using)

    logger.info("Policy %s created for vehicle %s", policy.policy_no, vehicle.pk)
    return policy


@storage_operation
def get_policy(policy_id, *, using) -> Policy:
    return fetch_policy(policy_id, using)
