"""
Property-based tests for promotion calculations.
"""
from decimal import Decimal

from hypothesis import given, strategies as st, settings
from django.test import SimpleTestCase

from apps.promotions.models import Discount, PromotionRule
from apps.promotions.services import PromotionEngine, CartSnapshot
from apps.promotions.services.rule_evaluator import evaluate, CONTEXT_RESOLVERS, OPERATORS

money = st.decimals(min_value=Decimal('0'), max_value=Decimal('100000'), places=2)
percent = st.integers(min_value=0, max_value=100)
ids = st.one_of(st.integers(min_value=1, max_value=500), st.text(alphabet='abcdef0123456789', min_size=1, max_size=6))


class DiscountProperties(SimpleTestCase):

    @given(product_ids=st.lists(ids, max_size=10))
    @settings(max_examples=50, deadline=None)
    def test_all_applies_to_any_products(self, product_ids):
        discount = Discount(store_id=1, code='ALL', applies_to=Discount.APPLIES_TO_ALL)
        self.assertTrue(discount.applies_to_products(product_ids))

    @given(subtotal=money, value=percent, cap=st.one_of(st.none(), money))
    @settings(max_examples=100, deadline=None)
    def test_standard_amount_is_bounded(self, subtotal, value, cap):
        discount = Discount(store_id=1, code='P', type=Discount.TYPE_PERCENTAGE,
                            value=Decimal(value), maximum_discount=cap)
        amount = discount.calculate_discount(subtotal)
        self.assertGreaterEqual(amount, Decimal('0'))
        self.assertLessEqual(amount, subtotal)
        if cap is not None:
            self.assertLessEqual(amount, cap)


class TieredProperties(SimpleTestCase):

    @given(
        thresholds=st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=6, unique=True),
        subtotal=money,
    )
    @settings(max_examples=100, deadline=None)
    def test_highest_threshold_not_above_subtotal(self, thresholds, subtotal):
        tiers = [{'threshold': threshold, 'discount_percent': index + 1} for index, threshold in enumerate(thresholds)]
        discount = Discount(store_id=1, code='T', promotion_type=Discount.PROMOTION_TIERED,
                            target_config={'tiers': tiers})

        result = PromotionEngine().calculate_advanced_discount(discount, [], subtotal)

        reached = [threshold for threshold in thresholds if threshold <= subtotal]
        if not reached:
            self.assertEqual(result['amount'], Decimal('0'))
            self.assertIsNone(result['details']['tier_reached'])
        else:
            self.assertEqual(result['details']['tier_reached']['threshold'], Decimal(max(reached)))


class BuyXGetYProperties(SimpleTestCase):

    @given(
        quantities=st.lists(st.integers(min_value=1, max_value=5), min_size=1, max_size=5),
        buy=st.integers(min_value=1, max_value=4),
        get=st.integers(min_value=1, max_value=3),
    )
    @settings(max_examples=100, deadline=None)
    def test_discounted_units_match_sets(self, quantities, buy, get):
        items = [
            {'product_id': index, 'quantity': quantity, 'price': Decimal(index + 1)}
            for index, quantity in enumerate(quantities)
        ]
        cart = CartSnapshot(store_id=1, items=items)
        discount = Discount(store_id=1, code='B', promotion_type=Discount.PROMOTION_BUY_X_GET_Y,
                            target_config={'buy_quantity': buy, 'get_quantity': get})

        result = PromotionEngine().calculate_advanced_discount(discount, items, Decimal('0'))

        sets = cart.quantity // (buy + get)
        self.assertEqual(result['details']['sets_qualified'], sets)
        discounted_units = sum(entry['quantity'] for entry in result['details']['applied_items'])
        self.assertEqual(discounted_units, sets * get)
        self.assertLessEqual(result['amount'], sum(Decimal(i['quantity']) * i['price'] for i in items))


class RuleProperties(SimpleTestCase):

    @given(
        rule_type=st.sampled_from(sorted(CONTEXT_RESOLVERS)),
        operator=st.sampled_from(sorted(OPERATORS)),
        value=st.text(max_size=12),
    )
    @settings(max_examples=200, deadline=None)
    def test_empty_context_never_matches(self, rule_type, operator, value):
        rule = PromotionRule(rule_type=rule_type, operator=operator, value=value,
                             metadata={'product_id': 1, 'category_id': 1, 'brand_id': 1})
        self.assertFalse(evaluate(rule, {}))

    @given(subtotal=money, low=money, high=money)
    @settings(max_examples=100, deadline=None)
    def test_between_matches_inclusive_range(self, subtotal, low, high):
        rule = PromotionRule(rule_type='cart_subtotal', operator='between', value=f'{low},{high}')
        self.assertEqual(evaluate(rule, {'cart': {'subtotal': subtotal}}), low <= subtotal <= high)
