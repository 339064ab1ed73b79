"""
Exceptions raised by the promotion engine.

Validation outcomes (unknown code, expired coupon, ineligible customer...)
are returned as result dicts by the coupon service and never raised.
"""


class PromotionError(Exception):
    """Base class for all promotion engine errors"""
    pass


class InvalidTargetConfig(PromotionError):
    """A discount's target_config does not match its promotion_type"""

    def __init__(self, promotion_type, errors=None):
        self.promotion_type = promotion_type
        self.errors = errors or {}
        super().__init__(f"Invalid target_config for promotion type '{promotion_type}': {self.errors}")


class UnknownPromotionType(InvalidTargetConfig):
    """promotion_type is set but not one the engine can calculate"""

    def __init__(self, promotion_type):
        super().__init__(promotion_type, {'promotion_type': ['Unknown promotion type.']})


class DiscountNotFound(PromotionError):
    """A code that passed validation no longer resolves to a discount"""

    def __init__(self, store_id, code):
        self.store_id = store_id
        self.code = code
        super().__init__(f"Discount '{code}' not found for store {store_id}")
