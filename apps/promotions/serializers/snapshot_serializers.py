"""
Serializers for the cart and customer snapshots handed to the engine.
"""
from decimal import Decimal

from rest_framework import serializers

from apps.common.validators import validate_price_range, validate_quantity
from .fields import IdentifierField


class CartItemSerializer(serializers.Serializer):
    """Serializer for a single cart line"""
    product_id = IdentifierField()
    quantity = serializers.IntegerField(validators=[validate_quantity])
    price = serializers.DecimalField(max_digits=None, decimal_places=None, validators=[validate_price_range])
    category_ids = serializers.ListField(child=IdentifierField(), required=False, default=list)
    brand_id = IdentifierField(required=False, allow_null=True, default=None)


class ShippingAddressSerializer(serializers.Serializer):
    """Serializer for the parts of a shipping address rules can test"""
    country = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    city = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class CartSnapshotSerializer(serializers.Serializer):
    """
    Serializer for a cart snapshot.

    When subtotal is omitted it is computed from the items.
    """
    id = IdentifierField(required=False, allow_null=True, default=None)
    store_id = serializers.IntegerField(min_value=0)
    subtotal = serializers.DecimalField(
        max_digits=None, decimal_places=None, required=False, allow_null=True,
        validators=[validate_price_range]
    )
    items = CartItemSerializer(many=True, required=False)
    discount_codes = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    shipping_address = ShippingAddressSerializer(required=False, allow_null=True)

    def validate(self, attrs):
        items = attrs.get('items') or []
        attrs['items'] = [dict(item) for item in items]
        if attrs.get('subtotal') is None:
            attrs['subtotal'] = sum(
                (item['price'] * item['quantity'] for item in attrs['items']),
                Decimal('0')
            )
        shipping = attrs.get('shipping_address')
        attrs['shipping_address'] = dict(shipping) if shipping else None
        return attrs


class CustomerSnapshotSerializer(serializers.Serializer):
    """Serializer for the customer facts promotions depend on"""
    id = IdentifierField(required=False, allow_null=True, default=None)
    group_ids = serializers.ListField(child=IdentifierField(), required=False, default=list)
    total_orders = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    lifetime_value = serializers.DecimalField(
        max_digits=None, decimal_places=None, min_value=Decimal('0'), required=False, default=Decimal('0')
    )
