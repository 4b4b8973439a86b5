from .catalog_service import list_body_types, list_vehicle_types, get_body_type, get_vehicle_type
from .party_service import get_party, list_party_vehicles
from .vehicle_service import (
    count_active_vehicles,
    create_vehicle,
    deactivate_vehicle,
    transfer_vehicle_ownership,
)
from .policy_service import create_policy, get_policy
from .sticker_service import issue_sticker, list_active_stickers, get_sticker, deactivate_sticker
