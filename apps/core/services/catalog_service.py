"""
Read-only access to the reference catalog (body types, vehicle types).
"""

import logging

from django.core.exceptions import ValidationError

from apps.core.exceptions import NotFound
from apps.core.models.catalog import BodyType, VehicleType
from apps.core.storage import storage_operation

logger = logging.getLogger(__name__)

LISTING_FIELDS = ('id', 'name')
DETAIL_FIELDS = ('id', 'name', 'description', 'is_active', 'created_at', 'updated_at')


def _listing(model, using, include_stats):
    qs = model.objects.db_manager(using).listing()
    fields = LISTING_FIELDS
    if include_stats:
        qs = qs.with_vehicle_count()
        fields = LISTING_FIELDS + ('vehicle_count',)
    return list(qs.values(*fields))


def _detail(model, pk, using):
    try:
        return model.objects.using(using).values(*DETAIL_FIELDS).get(pk=pk)
    except (model.DoesNotExist, ValidationError, ValueError):
        logger.warning("%s %s not found", model._meta.verbose_name, pk)
        raise NotFound(f"{model._meta.verbose_name.capitalize()} not found") from None


@storage_operation
def list_body_types(*, using, include_stats=False):
    """
    Active body types, ordered by name (case-insensitive).

    Returns:
        List of ``{'id', 'name'}`` dicts (plus ``vehicle_count`` when
        ``include_stats``). Empty when nothing is active.
    """
    return _listing(BodyType, using, include_stats)


@storage_operation
def list_vehicle_types(*, using, include_stats=False):
    """Active vehicle types; same contract as ``list_body_types``."""
    return _listing(VehicleType, using, include_stats)


@storage_operation
def get_body_type(body_type_id, *, using):
    return _detail(BodyType, body_type_id, using)


@storage_operation
def get_vehicle_type(vehicle_type_id, *, using):
    return _detail(VehicleType, vehicle_type_id, using)
