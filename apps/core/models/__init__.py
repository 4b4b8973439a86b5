"""
Core domain models package.
"""

# Import base models
from .base import (
    BaseModel,
    AuditableModel,
    SoftDeleteModel,
    ReferenceModel,
    next_timestamp,
)

# Import domain models
# Note: These imports must be after base imports to avoid circular dependency
from .catalog import BodyType, VehicleType
from .party import PartyKind, Owner, Client, Customer
from .vehicle import Vehicle
from .policy import Policy
from .sticker import StickerStatus, StickerStock, Sticker

__all__ = [
    'BaseModel',
    'AuditableModel',
    'SoftDeleteModel',
    'ReferenceModel',
    'next_timestamp',
    'BodyType',
    'VehicleType',
    'PartyKind',
    'Owner',
    'Client',
    'Customer',
    'Vehicle',
    'Policy',
    'StickerStatus',
    'StickerStock',
    'Sticker',
]
