import logging

from django.db import transaction
from django.core.exceptions import ValidationError

from apps.core.exceptions import NotFound, ValidationViolation
from apps.core.models.catalog import BodyType, VehicleType
from apps.core.models.party import Owner
from apps.core.models.policy import Policy
from apps.core.models.vehicle import Vehicle
from apps.core.storage import storage_operation
from .party_service import fetch_party, resolve_kind

logger = logging.getLogger(__name__)


def _as_owner(owner) -> Owner:
    if isinstance(owner, Owner):
        return owner
    if getattr(owner, 'kind', None) is not None:
        return Owner.of(owner)
    raise ValidationViolation("Owner is required", message_dict={'owner': ["Owner is required"]})


def _active_catalog_row(model, value, field, using):
    pk = getattr(value, 'pk', value)
    try:
        row = model.objects.using(using).get(pk=pk)
    except (model.DoesNotExist, ValidationError, ValueError):
        row = None
    if row is None or not row.is_active:
        message = f"{model._meta.verbose_name.capitalize()} must exist and be active"
        raise ValidationViolation(message, message_dict={field: [message]})
    return row


def _load_vehicle(vehicle_id, using, lock=False):
    qs = Vehicle.all_objects.using(using)
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=vehicle_id)
    except (Vehicle.DoesNotExist, ValidationError, ValueError):
        logger.warning("Vehicle %s not found", vehicle_id)
        raise NotFound("Vehicle not found") from None


@storage_operation
def count_active_vehicles(party_kind, party_id, *, using):
    """
    Count a party's active vehicles.

    The existence check and the count are two separate reads; the result
    is a point-in-time snapshot.

    Returns:
        ``{'count': n}``, ``n == 0`` for a party without vehicles.
    Raises:
        NotFound: "Client not found" / "Customer not found".
    """
    kind = resolve_kind(party_kind)
    party = fetch_party(kind, party_id, using)
    count = Vehicle.objects.using(using).active().owned_by(party.owner).count()
    return {'count': count}


@storage_operation
def create_vehicle(*, using, created_by=None, owner, body_type, vehicle_type,
                   registration_no: str, make: str, model: str, **kwargs) -> Vehicle:
    """
    Create a vehicle for a given owner.

    Rules:
    - Owner must exist (Client or Customer).
    - Body type and vehicle type must exist and be active right now; later
      deactivation of either does not affect the vehicle.
    - Registration number is unique among active vehicles (DB constraint); we
      also pre-check to give a nicer error.
    """
    owner = _as_owner(owner)
    with transaction.atomic(using=using):
        owner = fetch_party(owner.kind, owner.id, using).owner
        data = {
            "registration_no": registration_no.strip(),
            "make": make.strip(),
            "model": model.strip(),
            "body_type": _active_catalog_row(BodyType, body_type, 'body_type', using),
            "vehicle_type": _active_catalog_row(VehicleType, vehicle_type, 'vehicle_type', using),
            "created_by": created_by,
            "updated_by": created_by,
            # optionals
            "year": kwargs.get("year"),
            "chassis_number": (kwargs.get("chassis_number") or "").strip(),
            "engine_number": (kwargs.get("engine_number") or "").strip(),
        }

        if Vehicle.objects.using(using).active().filter(registration_no=data["registration_no"]).exists():
            raise ValidationViolation(
                "A vehicle with this registration already exists",
                message_dict={"registration_no": ["A vehicle with this registration already exists"]},
            )

        vehicle = Vehicle(**data)
        vehicle.owner = owner
        try:
            vehicle.full_clean()
        except ValidationError as exc:
            raise ValidationViolation.from_django(exc) from exc
        vehicle.save(using=using)

    logger.info("Vehicle %s registered to %s", vehicle.pk, owner)
    return vehicle


@storage_operation
def deactivate_vehicle(vehicle_id, *, using, actor=None) -> Vehicle:
    """
    Soft delete a vehicle. Calling it again on an inactive vehicle is a no-op.
    """
    with transaction.atomic(using=using):
        vehicle = _load_vehicle(vehicle_id, using, lock=True)
        if vehicle.is_deleted:
            logger.info("Vehicle %s already inactive", vehicle.pk)
            return vehicle
        vehicle.updated_by = actor
        vehicle.soft_delete(extra_fields=['updated_by'])

    logger.info("Vehicle %s deactivated", vehicle.pk)
    return vehicle


@storage_operation
def transfer_vehicle_ownership(vehicle_id, new_owner, *, using, actor=None) -> Vehicle:
    """
    Move a vehicle to another party.

    Every policy of the vehicle is re-pointed at the new owner in the same
    transaction, so a policy's party always equals its vehicle's owner.
    """
    new_owner = _as_owner(new_owner)
    with transaction.atomic(using=using):
        vehicle = _load_vehicle(vehicle_id, using, lock=True)
        if vehicle.is_deleted:
            raise ValidationViolation("Cannot transfer an inactive vehicle")
        new_owner = fetch_party(new_owner.kind, new_owner.id, using).owner

        vehicle.owner = new_owner
        vehicle.updated_by = actor
        vehicle.save(using=using, update_fields=['client', 'customer', 'updated_by'])

        policies = Policy.all_objects.using(using).select_for_update().filter(vehicle=vehicle)
        for policy in policies:
            new_owner.assign_to(policy)
            policy.updated_by = actor
            policy.save(using=using, update_fields=['client', 'customer', 'updated_by'])

    logger.info("Vehicle %s transferred to %s", vehicle.pk, new_owner)
    return vehicle
