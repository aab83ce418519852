"""
Enum Utilities for VARCHAR-based Tag Fields

Mode tags (shipping type, sea freight mode, location type) are stored as
VARCHAR columns, never as database ENUM types:

• Database: VARCHAR - NOT a database ENUM
• SQLAlchemy: String(n) with Mapped[str]
• Pydantic: Python Enum for API validation
• Case: All enum values stored in UPPERCASE

DATA FLOW:
    INPUT (API Request):  "air" → normalize_to_uppercase → ShippingType.AIR
    STORAGE:              ShippingType.AIR → get_enum_value → "AIR" → VARCHAR
"""

from enum import Enum
from typing import Any, Optional, Set


def get_enum_value(value: Any) -> Optional[str]:
    """
    Safely get string value from an enum or string.

    Examples:
        >>> get_enum_value(ShippingType.AIR)  # Pydantic input
        'AIR'
        >>> get_enum_value("AIR")  # Database value
        'AIR'
        >>> get_enum_value(None)
        None
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    return str(value)


# =============================================================================
# CASE NORMALIZATION FOR PYDANTIC SCHEMAS
# =============================================================================

def normalize_to_uppercase(value: Any, valid_values: Set[str]) -> Any:
    """
    Normalize a string value to UPPERCASE if it's a valid enum value.

    Examples:
        >>> normalize_to_uppercase('fcl', {'FCL', 'LCL'})
        'FCL'
        >>> normalize_to_uppercase('invalid', {'FCL', 'LCL'})
        'invalid'  # Returns as-is for Pydantic to raise validation error
    """
    if value is None:
        return value
    if isinstance(value, str):
        upper_v = value.strip().upper()
        if upper_v in valid_values:
            return upper_v
    return value


# =============================================================================
# PRE-DEFINED VALID VALUE SETS
# =============================================================================

VALID_SHIPPING_TYPES = {"AIR", "WATER"}

VALID_SEA_FREIGHT_MODES = {"FCL", "LCL"}

VALID_LOCATION_TYPES = {"SEA_PORT", "AIRPORT", "CITY", "INLAND_PORT"}
