"""
Promotions serializers module.
"""
from .fields import IdentifierField
from .config_serializers import (
    PROMOTION_BUY_X_GET_Y, PROMOTION_BUNDLE, PROMOTION_TIERED, PROMOTION_FREE_GIFT,
    BuyXGetYConfig, Tier, TieredConfig, BundleConfig, FreeGiftConfig,
    BuyXGetYConfigSerializer, TierSerializer, TieredConfigSerializer,
    BundleConfigSerializer, FreeGiftConfigSerializer,
    parse_target_config,
)
from .snapshot_serializers import (
    CartItemSerializer, ShippingAddressSerializer,
    CartSnapshotSerializer, CustomerSnapshotSerializer,
)

__all__ = [
    'IdentifierField',
    'PROMOTION_BUY_X_GET_Y',
    'PROMOTION_BUNDLE',
    'PROMOTION_TIERED',
    'PROMOTION_FREE_GIFT',
    'BuyXGetYConfig',
    'Tier',
    'TieredConfig',
    'BundleConfig',
    'FreeGiftConfig',
    'BuyXGetYConfigSerializer',
    'TierSerializer',
    'TieredConfigSerializer',
    'BundleConfigSerializer',
    'FreeGiftConfigSerializer',
    'parse_target_config',
    'CartItemSerializer',
    'ShippingAddressSerializer',
    'CartSnapshotSerializer',
    'CustomerSnapshotSerializer',
]
