"""
Coupon application service.

Drives a cart's list of applied discount codes: validation, applying and
removing codes, listing automatic discounts and recording usage once an
order is placed.
"""
import logging
from decimal import Decimal
from typing import Dict, List

from django.db import transaction

from apps.common.utils import quantize_money, to_decimal
from ..conf import get_cart_store, get_customer_provider, get_setting
from ..exceptions import DiscountNotFound
from ..models import CouponUsage, Discount
from .context import CustomerSnapshot, build_promotion_context
from .promotion_engine import PromotionEngine

logger = logging.getLogger(__name__)


class CouponApplicationService:
    """Service for applying, removing and recording discount codes"""

    def __init__(self, promotion_engine=None, customer_provider=None, cart_store=None):
        self.promotion_engine = promotion_engine or PromotionEngine()
        self.customer_provider = customer_provider or get_customer_provider()
        self.cart_store = cart_store or get_cart_store()

    @staticmethod
    def _result(valid, message, discount=None, **extra):
        result = {'valid': valid, 'message': message, 'discount': discount}
        result.update(extra)
        return result

    def _get_customer(self, customer_id):
        """Snapshot for a customer id; unknown ids get a snapshot with no order history"""
        if customer_id is None:
            return None
        customer = self.customer_provider.get_customer(customer_id)
        if customer is None:
            logger.debug(f"Customer {customer_id} not known to provider")
            return CustomerSnapshot(id=customer_id)
        return customer

    def validate_coupon(self, code, cart, customer_id=None) -> Dict:
        """Check a code against a cart without changing anything"""
        discount = Discount.get_by_code(cart.store_id, code)
        if discount is None:
            return self._result(False, 'Coupon code not found.')

        if not discount.is_valid():
            return self._result(False, 'This coupon is no longer valid.')

        if not discount.meets_minimum_order(cart.subtotal):
            return self._result(False, f'Minimum order amount of {discount.minimum_order} required.')

        customer = self._get_customer(customer_id)

        if not discount.is_customer_eligible(customer):
            return self._result(False, 'You are not eligible for this promotion.')

        if discount.requires_first_order() and not discount.is_first_order(customer):
            return self._result(False, 'This coupon is only valid for first-time customers.')

        if discount.has_customer_exceeded_limit(customer_id):
            return self._result(False, 'You have reached the usage limit for this coupon.')

        if not discount.applies_to_products(cart.product_ids, cart.category_ids, cart.brand_ids):
            return self._result(False, 'This coupon does not apply to items in your cart.')

        context = build_promotion_context(cart, customer)
        if not self.promotion_engine.evaluate_promotion_rules(discount, context):
            return self._result(False, 'Promotion requirements not met.')

        message = discount.display_message or get_setting('DEFAULT_SUCCESS_MESSAGE')
        return self._result(True, message, discount)

    def apply_coupon(self, code, cart, customer_id=None) -> Dict:
        """Validate a code and add it to the cart's applied codes"""
        validation = self.validate_coupon(code, cart, customer_id)
        if not validation['valid']:
            validation['cart'] = cart
            return validation

        discount = validation['discount']
        applied = [applied_code.lower() for applied_code in cart.discount_codes]
        if discount.code.lower() in applied:
            return self._result(False, 'This coupon is already applied.', cart=cart)

        if cart.discount_codes:
            applied_discounts = [
                Discount.get_by_code(cart.store_id, applied_code) for applied_code in cart.discount_codes
            ]
            if not discount.is_stackable or any(
                existing is not None and not existing.is_stackable for existing in applied_discounts
            ):
                return self._result(False, 'This coupon cannot be combined with other discounts.', cart=cart)

        cart.discount_codes.append(discount.code)
        self.cart_store.save(cart)
        logger.info(f"Applied coupon {discount.code} to cart {cart.id}")

        return self._result(True, validation['message'], discount, cart=cart)

    def remove_coupon(self, code, cart) -> Dict:
        """Remove a code from the cart's applied codes"""
        wanted = str(code or '').strip().lower()
        for index, applied_code in enumerate(cart.discount_codes):
            if applied_code.lower() == wanted:
                del cart.discount_codes[index]
                self.cart_store.save(cart)
                logger.info(f"Removed coupon {applied_code} from cart {cart.id}")
                return self._result(True, 'Coupon removed successfully.', cart=cart)

        return self._result(False, 'Coupon not found in cart.', cart=cart)

    def record_usage(self, order_id, store_id, customer_id, codes, order_subtotal, applied_items,
                     ip_address=None, user_agent=None, session_id='') -> List[CouponUsage]:
        """
        Record one usage per code for a placed order and bump usage counters.

        All codes are recorded in one transaction; a code that no longer
        resolves raises DiscountNotFound and nothing is recorded.
        """
        order_subtotal = to_decimal(order_subtotal)
        applied_items = list(applied_items or [])
        records = []

        with transaction.atomic():
            for code in codes:
                discount = Discount.get_by_code(store_id, code)
                if discount is None:
                    raise DiscountNotFound(store_id, code)

                result = self.promotion_engine.calculate_advanced_discount(
                    discount, applied_items, order_subtotal
                )
                usage = CouponUsage.objects.create(
                    store_id=store_id,
                    discount=discount,
                    order_id=str(order_id),
                    customer_id=None if customer_id is None else str(customer_id),
                    session_id=session_id or '',
                    discount_code=discount.code,
                    discount_amount=quantize_money(result['amount']),
                    order_subtotal=quantize_money(order_subtotal),
                    applied_to_items=applied_items,
                    ip_address=ip_address,
                    user_agent=user_agent or '',
                )

                if not discount.increment_usage():
                    logger.warning(
                        f"Usage limit reached for discount {discount.code} while recording order {order_id}"
                    )

                records.append(usage)
                logger.info(f"Recorded usage of {discount.code} on order {order_id}: {usage.discount_amount}")

        return records

    def get_automatic_discounts(self, cart, customer_id=None, payment_method=None) -> List[Dict]:
        """Automatic discounts this cart earns, with storefront presentation"""
        customer = self._get_customer(customer_id)
        context = build_promotion_context(cart, customer, payment_method=payment_method)
        entries = []

        for discount in self.promotion_engine.find_automatic_discounts(cart.store_id, context):
            if not discount.is_customer_eligible(customer):
                continue
            if discount.requires_first_order() and not discount.is_first_order(customer):
                continue

            result = self.promotion_engine.calculate_advanced_discount(discount, cart.items, cart.subtotal)
            amount = to_decimal(result['amount'])
            details = result['details']
            free_gift = details.get('type') == Discount.PROMOTION_FREE_GIFT and details.get('qualified')
            if amount <= Decimal('0') and not free_gift:
                continue

            entries.append({
                'discount': discount,
                'amount': amount,
                'details': details,
                'message': details.get('message') or discount.display_message or discount.name,
                'badge': {'text': discount.badge_text, 'color': discount.badge_color},
            })

        return entries

    def calculate_cart_discounts(self, cart, customer_id=None, payment_method=None) -> Dict:
        """Stack the cart's applied codes together with its automatic discounts"""
        discounts = []
        for code in cart.discount_codes:
            discount = Discount.get_by_code(cart.store_id, code)
            if discount is None:
                logger.warning(f"Applied code {code} on cart {cart.id} no longer resolves")
                continue
            discounts.append(discount)

        applied_ids = {discount.pk for discount in discounts}
        for entry in self.get_automatic_discounts(cart, customer_id, payment_method):
            if entry['discount'].pk not in applied_ids:
                discounts.append(entry['discount'])

        return self.promotion_engine.apply_stacking_logic(discounts, cart.items, cart.subtotal)
