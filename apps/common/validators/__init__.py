"""
Common validators module.
"""
from .price_validators import (
    validate_price_range, validate_quantity, validate_percentage
)

__all__ = [
    'validate_price_range',
    'validate_quantity',
    'validate_percentage',
]
