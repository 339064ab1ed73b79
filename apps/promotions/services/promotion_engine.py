"""
Promotion engine: automatic discount discovery, advanced promotion
calculation and stacking of several discounts on one cart.
"""
import logging
from decimal import Decimal
from typing import Dict, List

from apps.common.utils import to_decimal
from ..conf import get_setting
from ..exceptions import InvalidTargetConfig
from ..models import Discount
from .rule_evaluator import evaluate_rules

logger = logging.getLogger(__name__)


def log_config_error(discount, error):
    """Default on_config_error hook"""
    logger.warning(
        f"Discount {discount.code} (id={discount.pk}, store={discount.store_id}) "
        f"has an unusable target_config: {error}"
    )


def _zero_result():
    return {'amount': Decimal('0'), 'details': {}}


class PromotionEngine:
    """
    Stateless calculator over Discount definitions.

    ``on_config_error(discount, error)`` is called whenever a discount's
    promotion_type or target_config cannot be used; the discount then
    contributes nothing.
    """

    def __init__(self, on_config_error=None):
        self.on_config_error = on_config_error or log_config_error

    def find_automatic_discounts(self, store_id, context, now=None) -> List[Discount]:
        """Automatic discounts of a store in their validity window whose rules all pass"""
        candidates = (
            Discount.objects.for_store(store_id)
            .automatic()
            .within_window(now)
            .prefetch_related('rules')
            .by_priority()
        )
        matched = [discount for discount in candidates if self.evaluate_promotion_rules(discount, context)]
        logger.debug(f"Store {store_id}: {len(matched)} automatic discount(s) matched")
        return matched

    def evaluate_promotion_rules(self, discount, context) -> bool:
        return evaluate_rules(discount.rules.all(), context)

    def calculate_advanced_discount(self, discount, cart_items, cart_subtotal) -> Dict:
        """
        Amount and details for one discount on a cart.

        Discounts without a promotion_type use the standard calculation.
        """
        cart_items = list(cart_items or [])
        cart_subtotal = to_decimal(cart_subtotal)

        if not discount.is_advanced_promotion():
            return {
                'amount': discount.calculate_discount(cart_subtotal),
                'details': {'type': 'standard', 'applied_to': 'cart'},
            }

        try:
            config = discount.promotion_config
        except InvalidTargetConfig as exc:
            self.on_config_error(discount, exc)
            return _zero_result()

        calculators = {
            Discount.PROMOTION_BUY_X_GET_Y: self._calculate_buy_x_get_y,
            Discount.PROMOTION_BUNDLE: self._calculate_bundle,
            Discount.PROMOTION_TIERED: self._calculate_tiered,
            Discount.PROMOTION_FREE_GIFT: self._calculate_free_gift,
        }
        return calculators[discount.promotion_type](discount, config, cart_items, cart_subtotal)

    def _calculate_buy_x_get_y(self, discount, config, cart_items, cart_subtotal):
        total_quantity = sum(int(to_decimal(item.get('quantity'))) for item in cart_items)
        sets_qualified = total_quantity // config.set_size
        if config.max_applications is not None:
            sets_qualified = min(sets_qualified, config.max_applications)

        if sets_qualified == 0:
            return {
                'amount': Decimal('0'),
                'details': {'type': 'buy_x_get_y', 'sets_qualified': 0, 'applied_items': []},
            }

        # Cheapest units are the free ones; sorted() keeps input order on ties
        items_by_price = sorted(cart_items, key=lambda item: to_decimal(item.get('price')))
        remaining = sets_qualified * config.get_quantity
        amount = Decimal('0')
        applied_items = []

        for item in items_by_price:
            if remaining <= 0:
                break
            quantity = min(remaining, int(to_decimal(item.get('quantity'))))
            if quantity <= 0:
                continue
            item_discount = to_decimal(item.get('price')) * quantity * config.get_discount_percent / Decimal('100')
            amount += item_discount
            applied_items.append({
                'product_id': item.get('product_id'),
                'quantity': quantity,
                'discount': item_discount,
            })
            remaining -= quantity

        return {
            'amount': amount,
            'details': {
                'type': 'buy_x_get_y',
                'sets_qualified': sets_qualified,
                'applied_items': applied_items,
            },
        }

    def _calculate_bundle(self, discount, config, cart_items, cart_subtotal):
        cart_product_ids = {str(item.get('product_id')) for item in cart_items}
        required = {str(product_id) for product_id in config.required_products}
        bundle_complete = bool(required) and required <= cart_product_ids

        amount = discount.compute_amount(cart_subtotal) if bundle_complete else Decimal('0')
        return {
            'amount': amount,
            'details': {'type': 'bundle', 'bundle_complete': bundle_complete},
        }

    def _calculate_tiered(self, discount, config, cart_items, cart_subtotal):
        reached = None
        for tier in config.tiers:
            # First configured tier wins among equal thresholds
            if tier.threshold <= cart_subtotal and (reached is None or tier.threshold > reached.threshold):
                reached = tier

        if reached is None:
            return {'amount': Decimal('0'), 'details': {'type': 'tiered', 'tier_reached': None}}

        return {
            'amount': cart_subtotal * reached.discount_percent / Decimal('100'),
            'details': {'type': 'tiered', 'tier_reached': reached.as_dict()},
        }

    def _calculate_free_gift(self, discount, config, cart_items, cart_subtotal):
        qualified = cart_subtotal >= config.minimum_purchase
        details = {
            'type': 'free_gift',
            'qualified': qualified,
            'free_product_ids': list(config.free_product_ids),
        }
        if qualified:
            details['message'] = discount.display_message or get_setting('FREE_GIFT_MESSAGE')
        return {'amount': Decimal('0'), 'details': details}

    def apply_stacking_logic(self, discounts, cart_items, cart_subtotal) -> Dict:
        """
        Greedy, priority-ordered combination of discounts.

        The first discount is always taken; later ones only when stackable.
        A taken discount with stop_further_rules ends the pass. Each amount
        is computed on the original subtotal.
        """
        total_discount = Decimal('0')
        applied_discounts = []

        for discount in sorted(discounts, key=lambda d: d.priority):
            if applied_discounts and not discount.is_stackable:
                continue

            result = self.calculate_advanced_discount(discount, cart_items, cart_subtotal)
            amount = result.get('amount', Decimal('0'))
            total_discount += amount
            applied_discounts.append({
                'discount_id': discount.pk,
                'code': discount.code,
                'amount': amount,
                'details': result.get('details', {}),
            })

            if discount.stop_further_rules:
                break

        return {
            'total_discount': total_discount,
            'applied_discounts': applied_discounts,
        }
