"""
Typed target_config for advanced promotions.

Each promotion type stores a free-form JSON bag on the Discount. These
serializers validate the bag and turn it into a frozen dataclass so the
engine never reads raw dict keys.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from rest_framework import serializers

from apps.common.validators import validate_percentage
from ..exceptions import InvalidTargetConfig, UnknownPromotionType
from .fields import IdentifierField


PROMOTION_BUY_X_GET_Y = 'buy_x_get_y'
PROMOTION_BUNDLE = 'bundle'
PROMOTION_TIERED = 'tiered'
PROMOTION_FREE_GIFT = 'free_gift'


@dataclass(frozen=True)
class BuyXGetYConfig:
    buy_quantity: int = 1
    get_quantity: int = 1
    get_discount_percent: Decimal = Decimal('100')
    max_applications: Optional[int] = None

    @property
    def set_size(self):
        return self.buy_quantity + self.get_quantity


@dataclass(frozen=True)
class Tier:
    threshold: Decimal
    discount_percent: Decimal

    def as_dict(self):
        return {'threshold': self.threshold, 'discount_percent': self.discount_percent}


@dataclass(frozen=True)
class TieredConfig:
    # Sorted by threshold ascending; equal thresholds keep their configured order
    tiers: Tuple[Tier, ...] = ()


@dataclass(frozen=True)
class BundleConfig:
    required_products: Tuple = ()


@dataclass(frozen=True)
class FreeGiftConfig:
    free_product_ids: Tuple = ()
    minimum_purchase: Decimal = Decimal('0')


def _decimal_field(**kwargs):
    return serializers.DecimalField(max_digits=None, decimal_places=None, **kwargs)


class BuyXGetYConfigSerializer(serializers.Serializer):
    buy_quantity = serializers.IntegerField(min_value=1, default=1)
    get_quantity = serializers.IntegerField(min_value=1, default=1)
    get_discount_percent = _decimal_field(default=Decimal('100'), validators=[validate_percentage])
    max_applications = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)

    def to_config(self):
        return BuyXGetYConfig(**self.validated_data)


class TierSerializer(serializers.Serializer):
    threshold = _decimal_field(min_value=Decimal('0'))
    discount_percent = _decimal_field(validators=[validate_percentage])


class TieredConfigSerializer(serializers.Serializer):
    tiers = TierSerializer(many=True, required=False)

    def to_config(self):
        tiers = sorted(
            (Tier(**tier) for tier in self.validated_data.get('tiers', [])),
            key=lambda tier: tier.threshold,
        )
        return TieredConfig(tiers=tuple(tiers))


class BundleConfigSerializer(serializers.Serializer):
    required_products = serializers.ListField(child=IdentifierField(), required=False, default=list)

    def to_config(self):
        return BundleConfig(required_products=tuple(self.validated_data['required_products']))


class FreeGiftConfigSerializer(serializers.Serializer):
    free_product_ids = serializers.ListField(child=IdentifierField(), required=False, default=list)
    minimum_purchase = _decimal_field(min_value=Decimal('0'), default=Decimal('0'))

    def to_config(self):
        return FreeGiftConfig(
            free_product_ids=tuple(self.validated_data['free_product_ids']),
            minimum_purchase=self.validated_data['minimum_purchase'],
        )


CONFIG_SERIALIZERS = {
    PROMOTION_BUY_X_GET_Y: BuyXGetYConfigSerializer,
    PROMOTION_BUNDLE: BundleConfigSerializer,
    PROMOTION_TIERED: TieredConfigSerializer,
    PROMOTION_FREE_GIFT: FreeGiftConfigSerializer,
}


def parse_target_config(promotion_type, raw):
    """
    Validate a target_config bag for the given promotion type.

    Returns the matching config dataclass. Raises UnknownPromotionType for
    a type with no calculation and InvalidTargetConfig for a bag that does
    not validate.
    """
    serializer_class = CONFIG_SERIALIZERS.get(promotion_type)
    if serializer_class is None:
        raise UnknownPromotionType(promotion_type)

    serializer = serializer_class(data={} if raw is None else raw)
    if not serializer.is_valid():
        raise InvalidTargetConfig(promotion_type, dict(serializer.errors))
    return serializer.to_config()
