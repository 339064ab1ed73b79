from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.db.models import F, Q
from django.db.models.functions import Lower
from django.utils import timezone
from django.utils.functional import cached_property

from apps.common.utils import to_decimal
from ..exceptions import InvalidTargetConfig
from ..serializers.config_serializers import (
    PROMOTION_BUY_X_GET_Y, PROMOTION_BUNDLE, PROMOTION_TIERED, PROMOTION_FREE_GIFT,
    parse_target_config,
)


def _id_set(values):
    """Normalise a list of ids (ints or strings) for set comparison"""
    return {str(value) for value in (values or []) if value is not None}


class DiscountQuerySet(models.QuerySet):
    """Chainable filters used by the engine and the coupon service"""

    def for_store(self, store_id):
        return self.filter(store_id=store_id)

    def active(self):
        return self.filter(is_active=True)

    def within_window(self, now=None):
        now = now or timezone.now()
        return self.active().filter(
            Q(starts_at__isnull=True) | Q(starts_at__lte=now),
            Q(expires_at__isnull=True) | Q(expires_at__gte=now),
        )

    def automatic(self):
        return self.filter(is_automatic=True)

    def by_priority(self):
        return self.order_by('priority', 'id')


class Discount(models.Model):
    """Coupon or automatic promotion for a store"""

    TYPE_PERCENTAGE = 'percentage'
    TYPE_FIXED = 'fixed'
    TYPE_FREE_SHIPPING = 'free_shipping'
    TYPE_CHOICES = [
        (TYPE_PERCENTAGE, 'Percentage'),
        (TYPE_FIXED, 'Fixed Amount'),
        (TYPE_FREE_SHIPPING, 'Free Shipping'),
    ]

    PROMOTION_BUY_X_GET_Y = PROMOTION_BUY_X_GET_Y
    PROMOTION_BUNDLE = PROMOTION_BUNDLE
    PROMOTION_TIERED = PROMOTION_TIERED
    PROMOTION_FREE_GIFT = PROMOTION_FREE_GIFT
    PROMOTION_CHOICES = [
        (PROMOTION_BUY_X_GET_Y, 'Buy X Get Y'),
        (PROMOTION_BUNDLE, 'Bundle'),
        (PROMOTION_TIERED, 'Tiered'),
        (PROMOTION_FREE_GIFT, 'Free Gift'),
    ]

    APPLIES_TO_ALL = 'all'
    APPLIES_TO_SPECIFIC_PRODUCTS = 'specific_products'
    APPLIES_TO_SPECIFIC_CATEGORIES = 'specific_categories'
    APPLIES_TO_SPECIFIC_BRANDS = 'specific_brands'
    APPLIES_TO_CHOICES = [
        (APPLIES_TO_ALL, 'All Products'),
        (APPLIES_TO_SPECIFIC_PRODUCTS, 'Specific Products'),
        (APPLIES_TO_SPECIFIC_CATEGORIES, 'Specific Categories'),
        (APPLIES_TO_SPECIFIC_BRANDS, 'Specific Brands'),
    ]

    ELIGIBILITY_ALL = 'all'
    ELIGIBILITY_NEW_CUSTOMERS = 'new_customers_only'
    ELIGIBILITY_SPECIFIC_GROUPS = 'specific_groups'
    ELIGIBILITY_SPECIFIC_CUSTOMERS = 'specific_customers'
    ELIGIBILITY_CHOICES = [
        (ELIGIBILITY_ALL, 'All Customers'),
        (ELIGIBILITY_NEW_CUSTOMERS, 'New Customers Only'),
        (ELIGIBILITY_SPECIFIC_GROUPS, 'Specific Customer Groups'),
        (ELIGIBILITY_SPECIFIC_CUSTOMERS, 'Specific Customers'),
    ]

    store_id = models.PositiveBigIntegerField(db_index=True)
    code = models.CharField(max_length=50)
    name = models.CharField(max_length=200, blank=True, default='')
    description = models.TextField(blank=True, default='')

    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_PERCENTAGE)
    value = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    minimum_order = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    maximum_discount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    per_customer_limit = models.PositiveIntegerField(null=True, blank=True)
    current_usage = models.PositiveIntegerField(default=0)

    starts_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    # Targeting
    applies_to = models.CharField(max_length=30, choices=APPLIES_TO_CHOICES, default=APPLIES_TO_ALL)
    included_product_ids = models.JSONField(default=list, blank=True)
    excluded_product_ids = models.JSONField(default=list, blank=True)
    included_category_ids = models.JSONField(default=list, blank=True)
    excluded_category_ids = models.JSONField(default=list, blank=True)
    included_brand_ids = models.JSONField(default=list, blank=True)

    # Eligibility
    customer_eligibility = models.CharField(max_length=30, choices=ELIGIBILITY_CHOICES, default=ELIGIBILITY_ALL)
    allowed_customer_group_ids = models.JSONField(default=list, blank=True)
    allowed_customer_ids = models.JSONField(default=list, blank=True)
    first_order_only = models.BooleanField(default=False)

    # Advanced promotions
    promotion_type = models.CharField(max_length=20, choices=PROMOTION_CHOICES, null=True, blank=True)
    target_config = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    # Stacking and automation
    is_stackable = models.BooleanField(default=False)
    priority = models.IntegerField(default=0, help_text="Lower values are evaluated first")
    is_automatic = models.BooleanField(default=False)
    stop_further_rules = models.BooleanField(default=False)

    # Storefront presentation
    display_message = models.CharField(max_length=255, blank=True, default='')
    badge_text = models.CharField(max_length=50, blank=True, default='')
    badge_color = models.CharField(max_length=20, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DiscountQuerySet.as_manager()

    class Meta:
        db_table = 'promotion_discounts'
        verbose_name = 'Discount'
        verbose_name_plural = 'Discounts'
        ordering = ['priority', 'id']
        constraints = [
            models.UniqueConstraint(Lower('code'), 'store_id', name='unique_discount_code_per_store'),
        ]
        indexes = [
            models.Index(fields=['store_id', 'is_active', 'is_automatic'], name='promo_discount_store_auto_idx'),
            models.Index(fields=['priority'], name='promo_discount_priority_idx'),
        ]

    def __str__(self):
        return f"{self.code} ({self.get_type_display()} {self.value})"

    @classmethod
    def get_by_code(cls, store_id, code):
        """Case-insensitive lookup of a store's discount, rules prefetched"""
        if not code:
            return None
        return (
            cls.objects.for_store(store_id)
            .filter(code__iexact=str(code).strip())
            .prefetch_related('rules')
            .first()
        )

    def clean(self):
        super().clean()
        if self.is_advanced_promotion():
            try:
                parse_target_config(self.promotion_type, self.target_config)
            except InvalidTargetConfig as exc:
                raise ValidationError({'target_config': str(exc)})

    @cached_property
    def promotion_config(self):
        """Typed configuration for this promotion, parsed once per instance"""
        return parse_target_config(self.promotion_type, self.target_config)

    def is_advanced_promotion(self):
        return bool(self.promotion_type)

    def is_valid(self, now=None):
        """Active, inside the validity window and below the global usage cap"""
        if not self.is_active:
            return False

        now = now or timezone.now()
        if self.starts_at and self.starts_at > now:
            return False
        if self.expires_at and self.expires_at < now:
            return False

        if self.usage_limit is not None and self.current_usage >= self.usage_limit:
            return False

        return True

    def meets_minimum_order(self, order_total):
        if self.minimum_order is None:
            return True
        return to_decimal(order_total) >= to_decimal(self.minimum_order)

    def is_applicable(self, order_total, customer_id=None):
        if not self.is_valid():
            return False
        if not self.meets_minimum_order(order_total):
            return False
        if customer_id is not None and self.has_customer_exceeded_limit(customer_id):
            return False
        return True

    def compute_amount(self, base_amount):
        """Apply this discount's own type and value to an amount, without eligibility checks"""
        base_amount = to_decimal(base_amount)
        value = to_decimal(self.value)

        if self.type == self.TYPE_PERCENTAGE:
            amount = base_amount * value / Decimal('100')
        elif self.type == self.TYPE_FIXED:
            amount = value
        else:
            # Free shipping is settled by the shipping calculation
            amount = Decimal('0')

        if self.maximum_discount is not None and amount > to_decimal(self.maximum_discount):
            amount = to_decimal(self.maximum_discount)

        return max(Decimal('0'), min(amount, base_amount))

    def calculate_discount(self, order_total):
        """Standard (non-advanced) discount amount for an order total"""
        if not self.is_applicable(order_total):
            return Decimal('0')
        return self.compute_amount(order_total)

    def applies_to_products(self, product_ids, category_ids=(), brand_ids=()):
        """
        Check targeting against the ids present in a cart.

        ``applies_to = all`` matches anything, including an empty cart.
        Otherwise the matching inclusion list must intersect the supplied ids
        and no excluded product (or category) may be present.
        """
        if self.applies_to == self.APPLIES_TO_ALL:
            return True

        products = _id_set(product_ids)
        if products & _id_set(self.excluded_product_ids):
            return False

        if self.applies_to == self.APPLIES_TO_SPECIFIC_PRODUCTS:
            return bool(products & _id_set(self.included_product_ids))

        if self.applies_to == self.APPLIES_TO_SPECIFIC_CATEGORIES:
            categories = _id_set(category_ids)
            if categories & _id_set(self.excluded_category_ids):
                return False
            return bool(categories & _id_set(self.included_category_ids))

        if self.applies_to == self.APPLIES_TO_SPECIFIC_BRANDS:
            return bool(_id_set(brand_ids) & _id_set(self.included_brand_ids))

        return False

    def is_customer_eligible(self, customer=None):
        """Check customer_eligibility against a CustomerSnapshot (None for guests)"""
        if self.customer_eligibility == self.ELIGIBILITY_ALL:
            return True

        if self.customer_eligibility == self.ELIGIBILITY_NEW_CUSTOMERS:
            return self.is_first_order(customer)

        if self.customer_eligibility == self.ELIGIBILITY_SPECIFIC_CUSTOMERS:
            if customer is None or customer.id is None:
                return False
            return str(customer.id) in _id_set(self.allowed_customer_ids)

        if self.customer_eligibility == self.ELIGIBILITY_SPECIFIC_GROUPS:
            if customer is None:
                return False
            return bool(_id_set(customer.group_ids) & _id_set(self.allowed_customer_group_ids))

        return True

    def requires_first_order(self):
        return self.first_order_only

    def is_first_order(self, customer=None):
        """True only for a known customer with no previous orders"""
        if customer is None or customer.id is None:
            return False
        return customer.total_orders == 0

    def get_customer_usage_count(self, customer_id):
        if customer_id is None or self.pk is None:
            return 0
        return self.usages.filter(customer_id=str(customer_id)).count()

    def has_customer_exceeded_limit(self, customer_id):
        if not self.per_customer_limit or customer_id is None:
            return False
        return self.get_customer_usage_count(customer_id) >= self.per_customer_limit

    def increment_usage(self):
        """
        Atomically add one use, refusing once usage_limit is reached.

        Runs as a single conditional UPDATE so concurrent order completions
        cannot lose increments. Returns True if the row was updated.
        """
        updated = (
            Discount.objects.filter(pk=self.pk)
            .filter(Q(usage_limit__isnull=True) | Q(current_usage__lt=F('usage_limit')))
            .update(current_usage=F('current_usage') + 1)
        )
        if updated:
            self.refresh_from_db(fields=['current_usage'])
        return bool(updated)
