"""
Evaluation of PromotionRule conditions against a promotion context.

Every lookup fails closed: a missing section, key or metadata id makes
the rule false whatever its operator.
"""
import logging
from collections.abc import Mapping

from apps.common.utils import parse_number

logger = logging.getLogger(__name__)


def _lookup(context, section, key):
    values = context.get(section)
    if not isinstance(values, Mapping):
        return None
    return values.get(key)


def _cart_items(context):
    items = _lookup(context, 'cart', 'items')
    if not isinstance(items, (list, tuple)):
        return None
    return [item for item in items if isinstance(item, Mapping)]


def _sum_quantity(context, metadata, metadata_key, matches):
    target = (metadata or {}).get(metadata_key)
    if target is None:
        return None
    items = _cart_items(context)
    if items is None:
        return None
    total = 0
    for item in items:
        if matches(item, str(target)):
            total += parse_number(item.get('quantity')) or 0
    return total


def _product_quantity(context, metadata):
    return _sum_quantity(
        context, metadata, 'product_id',
        lambda item, target: str(item.get('product_id')) == target
    )


def _category_quantity(context, metadata):
    return _sum_quantity(
        context, metadata, 'category_id',
        lambda item, target: target in {str(value) for value in item.get('category_ids') or []}
    )


def _brand_quantity(context, metadata):
    return _sum_quantity(
        context, metadata, 'brand_id',
        lambda item, target: item.get('brand_id') is not None and str(item.get('brand_id')) == target
    )


def _field(section, key):
    return lambda context, metadata: _lookup(context, section, key)


CONTEXT_RESOLVERS = {
    'cart_subtotal': _field('cart', 'subtotal'),
    'cart_quantity': _field('cart', 'quantity'),
    'product_quantity': _product_quantity,
    'category_quantity': _category_quantity,
    'brand_quantity': _brand_quantity,
    'customer_group': _field('customer', 'group_ids'),
    'customer_total_orders': _field('customer', 'total_orders'),
    'customer_lifetime_value': _field('customer', 'lifetime_value'),
    'shipping_country': _field('shipping', 'country'),
    'shipping_state': _field('shipping', 'state'),
    'shipping_city': _field('shipping', 'city'),
    'payment_method': _field('payment', 'method'),
    'day_of_week': _field('datetime', 'day_of_week'),
    'time_of_day': _field('datetime', 'time_of_day'),
}


def _compare(actual, expected):
    """Three-way compare, numeric when both sides are numbers, else as trimmed strings"""
    actual_number = parse_number(actual)
    expected_number = parse_number(expected)
    if actual_number is not None and expected_number is not None:
        left, right = actual_number, expected_number
    else:
        left, right = str(actual).strip(), str(expected).strip()
    return (left > right) - (left < right)


def _is_list(value):
    return isinstance(value, (list, tuple, set))


def _split(value):
    return [part.strip() for part in value.split(',') if part.strip()]


def _equals(actual, expected):
    if _is_list(actual):
        return any(_compare(element, expected) == 0 for element in actual)
    return _compare(actual, expected) == 0


def _ordering(predicate):
    def check(actual, expected):
        if _is_list(actual):
            return False
        return predicate(_compare(actual, expected))
    return check


def _between(actual, expected):
    bounds = expected.split(',')
    if len(bounds) != 2 or _is_list(actual):
        return False
    low, high = parse_number(bounds[0]), parse_number(bounds[1])
    value = parse_number(actual)
    if low is None or high is None or value is None:
        return False
    return low <= value <= high


def _in(actual, expected):
    options = set(_split(expected))
    if _is_list(actual):
        return any(str(element).strip() in options for element in actual)
    return str(actual).strip() in options


def _contains(actual, expected):
    if _is_list(actual):
        return expected.strip() in {str(element).strip() for element in actual}
    return expected in str(actual)


OPERATORS = {
    'equals': _equals,
    'not_equals': lambda actual, expected: not _equals(actual, expected),
    'greater_than': _ordering(lambda result: result > 0),
    'greater_than_or_equal': _ordering(lambda result: result >= 0),
    'less_than': _ordering(lambda result: result < 0),
    'less_than_or_equal': _ordering(lambda result: result <= 0),
    'between': _between,
    'in': _in,
    'not_in': lambda actual, expected: not _in(actual, expected),
    'contains': _contains,
    'not_contains': lambda actual, expected: not _contains(actual, expected),
}


def evaluate(rule, context):
    """Return True if the rule holds for the context"""
    if not isinstance(context, Mapping) or not context:
        return False

    resolver = CONTEXT_RESOLVERS.get(rule.rule_type)
    operator = OPERATORS.get(rule.operator)
    if resolver is None or operator is None:
        logger.debug(f"Rule {rule.pk} has unsupported type/operator {rule.rule_type}/{rule.operator}")
        return False

    actual = resolver(context, rule.metadata if isinstance(rule.metadata, Mapping) else {})
    if actual is None:
        return False

    return operator(actual, '' if rule.value is None else str(rule.value))


def evaluate_rules(rules, context):
    """All rules must hold; an empty rule set always holds"""
    for rule in rules:
        if not evaluate(rule, context):
            return False
    return True
