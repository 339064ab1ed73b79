"""
Test configuration for the promotion engine.
"""
import os
from decimal import Decimal

import django
import pytest


def pytest_configure():
    """Configure Django settings for testing."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'promo_server.settings.test')
    django.setup()


@pytest.fixture
def engine():
    from apps.promotions.services import PromotionEngine
    return PromotionEngine()


@pytest.fixture
def cart_store():
    from apps.promotions.services import InMemoryCartStore
    return InMemoryCartStore()


@pytest.fixture
def customer_provider():
    """Provider knowing a returning customer (7) and a new one (8)"""
    from apps.promotions.services import StaticCustomerProvider
    return StaticCustomerProvider({
        7: {'group_ids': [1, 3], 'total_orders': 4, 'lifetime_value': '820.50'},
        8: {'group_ids': [], 'total_orders': 0, 'lifetime_value': '0'},
    })


@pytest.fixture
def coupon_service(engine, customer_provider, cart_store):
    from apps.promotions.services import CouponApplicationService
    return CouponApplicationService(
        promotion_engine=engine,
        customer_provider=customer_provider,
        cart_store=cart_store,
    )


@pytest.fixture
def cart():
    """Three-line cart worth 100.00 in store 1"""
    from apps.promotions.services import CartSnapshot
    return CartSnapshot(
        id='cart-1',
        store_id=1,
        subtotal=Decimal('100.00'),
        items=[
            {'product_id': 10, 'quantity': 2, 'price': Decimal('20.00'), 'category_ids': [5], 'brand_id': 3},
            {'product_id': 11, 'quantity': 1, 'price': Decimal('50.00'), 'category_ids': [6], 'brand_id': 4},
            {'product_id': 12, 'quantity': 1, 'price': Decimal('10.00'), 'category_ids': [5], 'brand_id': None},
        ],
        shipping_address={'country': 'US', 'state': 'CA', 'city': 'San Francisco'},
    )
