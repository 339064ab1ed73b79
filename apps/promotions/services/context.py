"""
Snapshots of cart and customer state, and the context mapping rules read.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.utils import timezone

from apps.common.utils import to_decimal
from ..serializers import CartSnapshotSerializer, CustomerSnapshotSerializer


@dataclass
class CustomerSnapshot:
    """What the engine knows about a customer; total_orders is None when unknown"""
    id: Any = None
    group_ids: List[Any] = field(default_factory=list)
    total_orders: Optional[int] = None
    lifetime_value: Decimal = Decimal('0')

    @classmethod
    def from_payload(cls, data):
        serializer = CustomerSnapshotSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        return cls(**serializer.validated_data)

    def as_context(self):
        return {
            'id': self.id,
            'group_ids': list(self.group_ids),
            'total_orders': self.total_orders,
            'lifetime_value': to_decimal(self.lifetime_value),
        }


@dataclass
class CartSnapshot:
    """
    A cart as the promotion engine sees it.

    ``discount_codes`` is the only field the coupon service mutates; it is
    persisted through the configured CartStore.
    """
    store_id: int
    subtotal: Decimal = Decimal('0')
    items: List[Dict[str, Any]] = field(default_factory=list)
    discount_codes: List[str] = field(default_factory=list)
    shipping_address: Optional[Dict[str, Any]] = None
    id: Any = None

    @classmethod
    def from_payload(cls, data):
        """Build a snapshot from loosely typed input, raising ValidationError on bad data"""
        serializer = CartSnapshotSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        return cls(**serializer.validated_data)

    @property
    def quantity(self):
        return sum(int(item.get('quantity') or 0) for item in self.items)

    @property
    def product_ids(self):
        return [item.get('product_id') for item in self.items if item.get('product_id') is not None]

    @property
    def category_ids(self):
        ids = []
        for item in self.items:
            for category_id in item.get('category_ids') or []:
                if category_id not in ids:
                    ids.append(category_id)
        return ids

    @property
    def brand_ids(self):
        ids = []
        for item in self.items:
            brand_id = item.get('brand_id')
            if brand_id is not None and brand_id not in ids:
                ids.append(brand_id)
        return ids


def build_promotion_context(cart, customer=None, payment_method=None, now=None):
    """
    Build the mapping PromotionRule.evaluate() reads.

    Sections with nothing to say are left out so rules on them fail closed:
    no ``customer`` for anonymous carts, no ``shipping`` without an address,
    no ``payment`` without a method.
    """
    now = now or timezone.now()
    if timezone.is_aware(now):
        now = timezone.localtime(now)

    context = {
        'cart': {
            'subtotal': to_decimal(cart.subtotal),
            'quantity': cart.quantity,
            'items': [dict(item) for item in cart.items],
        },
        'datetime': {
            # 0 = Sunday ... 6 = Saturday
            'day_of_week': (now.weekday() + 1) % 7,
            'time_of_day': now.strftime('%H:%M'),
        },
    }

    if customer is not None:
        context['customer'] = customer.as_context()

    if cart.shipping_address:
        context['shipping'] = {
            key: cart.shipping_address.get(key) for key in ('country', 'state', 'city')
        }

    if payment_method:
        context['payment'] = {'method': payment_method}

    return context
