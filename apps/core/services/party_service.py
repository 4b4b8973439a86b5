"""
Party registry: lookups of Clients and Customers.
"""

import logging

from django.core.exceptions import ValidationError

from apps.core.exceptions import NotFound, ValidationViolation
from apps.core.models.party import PartyKind
from apps.core.models.vehicle import Vehicle
from apps.core.storage import storage_operation

logger = logging.getLogger(__name__)


def resolve_kind(party_kind) -> PartyKind:
    """
    Parse ``party_kind``; an unknown kind is a validation failure.
    """
    try:
        return PartyKind.parse(party_kind)
    except ValueError as exc:
        raise ValidationViolation(str(exc), message_dict={'party_kind': [str(exc)]}) from None


def fetch_party(kind: PartyKind, party_id, using):
    """
    Load a party of exactly ``kind``. Soft-deleted parties are still found;
    there is no fallback to the other kind.
    """
    model = kind.model
    try:
        return model.all_objects.using(using).get(pk=party_id)
    except (model.DoesNotExist, ValidationError, ValueError):
        logger.warning("%s %s not found", kind.label, party_id)
        raise NotFound(f"{kind.label} not found") from None


@storage_operation
def get_party(party_kind, party_id, *, using):
    """
    Get a Client or Customer by id.

    Raises:
        ValidationViolation: ``party_kind`` is not ``client``/``customer``.
        NotFound: no party of that kind has this id.
    """
    return fetch_party(resolve_kind(party_kind), party_id, using)


@storage_operation
def list_party_vehicles(party_kind, party_id, *, using):
    """Active vehicles owned by the party, newest first."""
    party = fetch_party(resolve_kind(party_kind), party_id, using)
    return list(
        Vehicle.objects.using(using)
        .active()
        .owned_by(party.owner)
        .with_catalog()
        .order_by('-created_at')
    )
