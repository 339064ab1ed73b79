from django.db import models


class PromotionRule(models.Model):
    """A single condition a discount's context must satisfy; all rules of a discount must pass"""

    RULE_CART_SUBTOTAL = 'cart_subtotal'
    RULE_CART_QUANTITY = 'cart_quantity'
    RULE_PRODUCT_QUANTITY = 'product_quantity'
    RULE_CATEGORY_QUANTITY = 'category_quantity'
    RULE_BRAND_QUANTITY = 'brand_quantity'
    RULE_CUSTOMER_GROUP = 'customer_group'
    RULE_CUSTOMER_TOTAL_ORDERS = 'customer_total_orders'
    RULE_CUSTOMER_LIFETIME_VALUE = 'customer_lifetime_value'
    RULE_SHIPPING_COUNTRY = 'shipping_country'
    RULE_SHIPPING_STATE = 'shipping_state'
    RULE_SHIPPING_CITY = 'shipping_city'
    RULE_PAYMENT_METHOD = 'payment_method'
    RULE_DAY_OF_WEEK = 'day_of_week'
    RULE_TIME_OF_DAY = 'time_of_day'

    RULE_TYPES = [
        (RULE_CART_SUBTOTAL, 'Cart Subtotal'),
        (RULE_CART_QUANTITY, 'Cart Quantity'),
        (RULE_PRODUCT_QUANTITY, 'Product Quantity'),
        (RULE_CATEGORY_QUANTITY, 'Category Quantity'),
        (RULE_BRAND_QUANTITY, 'Brand Quantity'),
        (RULE_CUSTOMER_GROUP, 'Customer Group'),
        (RULE_CUSTOMER_TOTAL_ORDERS, 'Customer Total Orders'),
        (RULE_CUSTOMER_LIFETIME_VALUE, 'Customer Lifetime Value'),
        (RULE_SHIPPING_COUNTRY, 'Shipping Country'),
        (RULE_SHIPPING_STATE, 'Shipping State'),
        (RULE_SHIPPING_CITY, 'Shipping City'),
        (RULE_PAYMENT_METHOD, 'Payment Method'),
        (RULE_DAY_OF_WEEK, 'Day of Week'),
        (RULE_TIME_OF_DAY, 'Time of Day'),
    ]

    OPERATOR_EQUALS = 'equals'
    OPERATOR_NOT_EQUALS = 'not_equals'
    OPERATOR_GREATER_THAN = 'greater_than'
    OPERATOR_GREATER_THAN_OR_EQUAL = 'greater_than_or_equal'
    OPERATOR_LESS_THAN = 'less_than'
    OPERATOR_LESS_THAN_OR_EQUAL = 'less_than_or_equal'
    OPERATOR_BETWEEN = 'between'
    OPERATOR_IN = 'in'
    OPERATOR_NOT_IN = 'not_in'
    OPERATOR_CONTAINS = 'contains'
    OPERATOR_NOT_CONTAINS = 'not_contains'

    OPERATORS = [
        (OPERATOR_EQUALS, 'Equals'),
        (OPERATOR_NOT_EQUALS, 'Not Equals'),
        (OPERATOR_GREATER_THAN, 'Greater Than'),
        (OPERATOR_GREATER_THAN_OR_EQUAL, 'Greater Than or Equal'),
        (OPERATOR_LESS_THAN, 'Less Than'),
        (OPERATOR_LESS_THAN_OR_EQUAL, 'Less Than or Equal'),
        (OPERATOR_BETWEEN, 'Between'),
        (OPERATOR_IN, 'In'),
        (OPERATOR_NOT_IN, 'Not In'),
        (OPERATOR_CONTAINS, 'Contains'),
        (OPERATOR_NOT_CONTAINS, 'Does Not Contain'),
    ]

    discount = models.ForeignKey('promotions.Discount', on_delete=models.CASCADE, related_name='rules')
    rule_type = models.CharField(max_length=30, choices=RULE_TYPES)
    operator = models.CharField(max_length=30, choices=OPERATORS, default=OPERATOR_EQUALS)
    value = models.CharField(max_length=255, blank=True, default='',
                             help_text="'min,max' for between; comma separated list for in/not_in")
    metadata = models.JSONField(default=dict, blank=True,
                                help_text="Scope for item rules, e.g. {'product_id': 12}")
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'promotion_rules'
        verbose_name = 'Promotion Rule'
        verbose_name_plural = 'Promotion Rules'
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.get_rule_type_display()} {self.operator} {self.value}"

    def evaluate(self, context):
        """Evaluate this rule against a promotion context"""
        from ..services.rule_evaluator import evaluate
        return evaluate(self, context)
