"""
Promotions models module.

All models are exported from this module.
"""
from .discount import Discount
from .rule import PromotionRule
from .usage import CouponUsage

__all__ = [
    'Discount',
    'PromotionRule',
    'CouponUsage',
]
