"""
Tests for promotion rule evaluation against a promotion context.
"""
from datetime import datetime
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from apps.promotions.models import PromotionRule
from apps.promotions.services import CartSnapshot, CustomerSnapshot, build_promotion_context
from apps.promotions.services.rule_evaluator import evaluate, evaluate_rules, CONTEXT_RESOLVERS, OPERATORS


def make_rule(rule_type, operator, value='', metadata=None):
    return PromotionRule(rule_type=rule_type, operator=operator, value=value, metadata=metadata or {})


@pytest.fixture
def context():
    return {
        'cart': {
            'subtotal': Decimal('120.00'),
            'quantity': 5,
            'items': [
                {'product_id': 10, 'quantity': 2, 'price': Decimal('20'), 'category_ids': [5, 9], 'brand_id': 3},
                {'product_id': '11', 'quantity': 3, 'price': Decimal('26.67'), 'category_ids': [6], 'brand_id': 4},
            ],
        },
        'customer': {'id': 7, 'group_ids': [1, 3], 'total_orders': 4, 'lifetime_value': Decimal('820.50')},
        'shipping': {'country': 'US', 'state': 'CA', 'city': 'San Francisco'},
        'payment': {'method': 'credit_card'},
        'datetime': {'day_of_week': 5, 'time_of_day': '14:30'},
    }


class TestContextResolution:

    def test_cart_subtotal_numeric_comparison(self, context):
        assert evaluate(make_rule('cart_subtotal', 'greater_than', '100'), context)
        assert evaluate(make_rule('cart_subtotal', 'equals', '120'), context)
        assert not evaluate(make_rule('cart_subtotal', 'less_than', '100'), context)

    def test_product_quantity_sums_matching_items(self, context):
        rule = make_rule('product_quantity', 'greater_than_or_equal', '3', {'product_id': 11})
        assert evaluate(rule, context)

    def test_product_quantity_of_absent_product_is_zero(self, context):
        rule = make_rule('product_quantity', 'equals', '0', {'product_id': 999})
        assert evaluate(rule, context)

    def test_category_quantity(self, context):
        assert evaluate(make_rule('category_quantity', 'equals', '2', {'category_id': 9}), context)
        assert evaluate(make_rule('category_quantity', 'equals', '3', {'category_id': '6'}), context)

    def test_brand_quantity(self, context):
        assert evaluate(make_rule('brand_quantity', 'greater_than', '2', {'brand_id': 4}), context)

    def test_item_rule_without_metadata_fails(self, context):
        assert not evaluate(make_rule('product_quantity', 'greater_than_or_equal', '0'), context)

    def test_customer_group_matches_any_member(self, context):
        assert evaluate(make_rule('customer_group', 'equals', '3'), context)
        assert evaluate(make_rule('customer_group', 'in', '2,3'), context)
        assert not evaluate(make_rule('customer_group', 'not_in', '2,3'), context)
        assert evaluate(make_rule('customer_group', 'not_equals', '2'), context)

    def test_customer_history(self, context):
        assert evaluate(make_rule('customer_total_orders', 'greater_than', '3'), context)
        assert evaluate(make_rule('customer_lifetime_value', 'between', '500,1000'), context)

    def test_shipping_fields(self, context):
        assert evaluate(make_rule('shipping_country', 'in', 'US, CA'), context)
        assert evaluate(make_rule('shipping_state', 'not_in', 'NY,TX'), context)
        assert evaluate(make_rule('shipping_city', 'contains', 'Francisco'), context)
        assert evaluate(make_rule('shipping_city', 'not_contains', 'Oakland'), context)

    def test_payment_method(self, context):
        assert evaluate(make_rule('payment_method', 'equals', 'credit_card'), context)
        assert not evaluate(make_rule('payment_method', 'equals', 'paypal'), context)

    def test_datetime_fields(self, context):
        assert evaluate(make_rule('day_of_week', 'in', '5,6'), context)
        assert evaluate(make_rule('time_of_day', 'greater_than', '09:00'), context)
        assert evaluate(make_rule('time_of_day', 'less_than', '17:00'), context)


class TestOperators:

    def test_between_is_inclusive(self, context):
        assert evaluate(make_rule('cart_subtotal', 'between', '120,200'), context)
        assert evaluate(make_rule('cart_subtotal', 'between', '50,120'), context)
        assert not evaluate(make_rule('cart_subtotal', 'between', '121,200'), context)

    def test_between_with_bad_bounds_is_false(self, context):
        assert not evaluate(make_rule('cart_subtotal', 'between', '100'), context)
        assert not evaluate(make_rule('cart_subtotal', 'between', 'low,high'), context)
        assert not evaluate(make_rule('shipping_city', 'between', '1,2'), context)

    def test_equals_falls_back_to_strings(self, context):
        assert evaluate(make_rule('shipping_country', 'equals', ' US '), context)
        assert not evaluate(make_rule('shipping_country', 'equals', 'us'), context)

    def test_numeric_equality_ignores_formatting(self, context):
        assert evaluate(make_rule('cart_subtotal', 'equals', '120.0'), context)

    def test_contains_on_list_is_membership(self, context):
        assert evaluate(make_rule('customer_group', 'contains', '1'), context)
        assert evaluate(make_rule('customer_group', 'not_contains', '2'), context)

    def test_ordering_on_list_is_false(self, context):
        assert not evaluate(make_rule('customer_group', 'greater_than', '0'), context)

    def test_unknown_operator_is_false(self, context):
        assert not evaluate(make_rule('cart_subtotal', 'roughly', '120'), context)

    def test_unknown_rule_type_is_false(self, context):
        assert not evaluate(make_rule('weather', 'equals', 'sunny'), context)


class TestFailClosed:

    @pytest.mark.parametrize('rule_type', sorted(CONTEXT_RESOLVERS))
    @pytest.mark.parametrize('operator', sorted(OPERATORS))
    def test_empty_context_is_false(self, rule_type, operator):
        rule = make_rule(rule_type, operator, '0', {'product_id': 1, 'category_id': 1, 'brand_id': 1})
        assert evaluate(rule, {}) is False

    def test_missing_section_is_false_even_for_negations(self, context):
        del context['customer']
        assert not evaluate(make_rule('customer_group', 'not_in', '1'), context)
        assert not evaluate(make_rule('customer_total_orders', 'not_equals', '0'), context)

    def test_none_value_is_false(self, context):
        context['shipping']['state'] = None
        assert not evaluate(make_rule('shipping_state', 'not_equals', 'NY'), context)

    def test_model_evaluate_delegates(self, context):
        assert make_rule('cart_quantity', 'equals', '5').evaluate(context)


class TestEvaluateRules:

    def test_no_rules_pass(self, context):
        assert evaluate_rules([], context)

    def test_all_rules_must_pass(self, context):
        passing = make_rule('cart_subtotal', 'greater_than', '100')
        failing = make_rule('payment_method', 'equals', 'paypal')
        assert evaluate_rules([passing], context)
        assert not evaluate_rules([passing, failing], context)


class TestBuildPromotionContext:

    def test_sections(self, cart):
        customer = CustomerSnapshot(id=7, group_ids=[1], total_orders=2, lifetime_value=Decimal('80'))
        # 2026-10-18 is a Sunday
        now = datetime(2026, 10, 18, 9, 5)
        context = build_promotion_context(cart, customer, payment_method='paypal', now=now)

        assert context['cart']['subtotal'] == Decimal('100.00')
        assert context['cart']['quantity'] == 4
        assert context['customer']['group_ids'] == [1]
        assert context['shipping'] == {'country': 'US', 'state': 'CA', 'city': 'San Francisco'}
        assert context['payment'] == {'method': 'paypal'}
        assert context['datetime'] == {'day_of_week': 0, 'time_of_day': '09:05'}

    def test_anonymous_cart_has_no_customer_section(self, cart):
        context = build_promotion_context(cart)
        assert 'customer' not in context
        assert 'payment' not in context
        assert not evaluate(make_rule('customer_total_orders', 'equals', '0'), context)

    def test_saturday_is_six(self):
        cart = CartSnapshot(store_id=1)
        context = build_promotion_context(cart, now=datetime(2026, 10, 17, 23, 59))
        assert context['datetime']['day_of_week'] == 6
        assert 'shipping' not in context


class TestSnapshotPayloads:

    def test_cart_subtotal_computed_from_items(self):
        cart = CartSnapshot.from_payload({
            'id': 'c-9',
            'store_id': 3,
            'items': [
                {'product_id': 1, 'quantity': 2, 'price': '4.25', 'category_ids': ['shoes']},
                {'product_id': 'sku-2', 'quantity': '1', 'price': 10},
            ],
        })
        assert cart.subtotal == Decimal('18.50')
        assert cart.quantity == 3
        assert cart.product_ids == [1, 'sku-2']
        assert cart.category_ids == ['shoes']
        assert cart.shipping_address is None
        assert cart.discount_codes == []

    def test_cart_rejects_bad_items(self):
        with pytest.raises(ValidationError):
            CartSnapshot.from_payload({'store_id': 1, 'items': [{'product_id': True, 'quantity': 1, 'price': 1}]})
        with pytest.raises(ValidationError):
            CartSnapshot.from_payload({'store_id': 1, 'items': [{'product_id': 1, 'quantity': 0, 'price': 1}]})

    def test_customer_payload(self):
        customer = CustomerSnapshot.from_payload({'id': 5, 'group_ids': [2], 'total_orders': 0})
        assert customer.total_orders == 0
        assert customer.lifetime_value == Decimal('0')
        assert customer.as_context()['group_ids'] == [2]
