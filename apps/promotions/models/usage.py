from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class CouponUsage(models.Model):
    """Append-only record of a discount used on a completed order"""

    store_id = models.PositiveBigIntegerField(db_index=True)
    discount = models.ForeignKey('promotions.Discount', on_delete=models.PROTECT, related_name='usages')
    order_id = models.CharField(max_length=64)
    customer_id = models.CharField(max_length=64, null=True, blank=True)
    session_id = models.CharField(max_length=100, blank=True, default='')
    discount_code = models.CharField(max_length=50)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2)
    order_subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    applied_to_items = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'promotion_coupon_usages'
        verbose_name = 'Coupon Usage'
        verbose_name_plural = 'Coupon Usages'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['order_id', 'discount'], name='unique_usage_per_order_discount'),
        ]
        indexes = [
            models.Index(fields=['discount', 'customer_id'], name='promo_usage_customer_idx'),
            models.Index(fields=['order_id'], name='promo_usage_order_idx'),
        ]

    def __str__(self):
        return f"{self.discount_code} on order {self.order_id} - {self.discount_amount}"
