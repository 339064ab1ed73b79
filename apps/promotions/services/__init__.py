"""
Promotions services module.
"""
from .context import CartSnapshot, CustomerSnapshot, build_promotion_context
from .providers import CustomerProvider, CartStore, StaticCustomerProvider, InMemoryCartStore
from .rule_evaluator import evaluate, evaluate_rules
from .promotion_engine import PromotionEngine, log_config_error
from .coupon_service import CouponApplicationService

__all__ = [
    'CartSnapshot',
    'CustomerSnapshot',
    'build_promotion_context',
    'CustomerProvider',
    'CartStore',
    'StaticCustomerProvider',
    'InMemoryCartStore',
    'evaluate',
    'evaluate_rules',
    'PromotionEngine',
    'log_config_error',
    'CouponApplicationService',
]
