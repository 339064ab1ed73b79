from decimal import Decimal

import django.core.serializers.json
import django.db.models.deletion
import django.db.models.functions.text
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Discount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('store_id', models.PositiveBigIntegerField(db_index=True)),
                ('code', models.CharField(max_length=50)),
                ('name', models.CharField(blank=True, default='', max_length=200)),
                ('description', models.TextField(blank=True, default='')),
                ('type', models.CharField(choices=[('percentage', 'Percentage'), ('fixed', 'Fixed Amount'), ('free_shipping', 'Free Shipping')], default='percentage', max_length=20)),
                ('value', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10)),
                ('minimum_order', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('maximum_discount', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('usage_limit', models.PositiveIntegerField(blank=True, null=True)),
                ('per_customer_limit', models.PositiveIntegerField(blank=True, null=True)),
                ('current_usage', models.PositiveIntegerField(default=0)),
                ('starts_at', models.DateTimeField(blank=True, null=True)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('applies_to', models.CharField(choices=[('all', 'All Products'), ('specific_products', 'Specific Products'), ('specific_categories', 'Specific Categories'), ('specific_brands', 'Specific Brands')], default='all', max_length=30)),
                ('included_product_ids', models.JSONField(blank=True, default=list)),
                ('excluded_product_ids', models.JSONField(blank=True, default=list)),
                ('included_category_ids', models.JSONField(blank=True, default=list)),
                ('excluded_category_ids', models.JSONField(blank=True, default=list)),
                ('included_brand_ids', models.JSONField(blank=True, default=list)),
                ('customer_eligibility', models.CharField(choices=[('all', 'All Customers'), ('new_customers_only', 'New Customers Only'), ('specific_groups', 'Specific Customer Groups'), ('specific_customers', 'Specific Customers')], default='all', max_length=30)),
                ('allowed_customer_group_ids', models.JSONField(blank=True, default=list)),
                ('allowed_customer_ids', models.JSONField(blank=True, default=list)),
                ('first_order_only', models.BooleanField(default=False)),
                ('promotion_type', models.CharField(blank=True, choices=[('buy_x_get_y', 'Buy X Get Y'), ('bundle', 'Bundle'), ('tiered', 'Tiered'), ('free_gift', 'Free Gift')], max_length=20, null=True)),
                ('target_config', models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('is_stackable', models.BooleanField(default=False)),
                ('priority', models.IntegerField(default=0, help_text='Lower values are evaluated first')),
                ('is_automatic', models.BooleanField(default=False)),
                ('stop_further_rules', models.BooleanField(default=False)),
                ('display_message', models.CharField(blank=True, default='', max_length=255)),
                ('badge_text', models.CharField(blank=True, default='', max_length=50)),
                ('badge_color', models.CharField(blank=True, default='', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Discount',
                'verbose_name_plural': 'Discounts',
                'db_table': 'promotion_discounts',
                'ordering': ['priority', 'id'],
                'indexes': [
                    models.Index(fields=['store_id', 'is_active', 'is_automatic'], name='promo_discount_store_auto_idx'),
                    models.Index(fields=['priority'], name='promo_discount_priority_idx'),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name='discount',
            constraint=models.UniqueConstraint(django.db.models.functions.text.Lower('code'), models.F('store_id'), name='unique_discount_code_per_store'),
        ),
        migrations.CreateModel(
            name='PromotionRule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rule_type', models.CharField(choices=[('cart_subtotal', 'Cart Subtotal'), ('cart_quantity', 'Cart Quantity'), ('product_quantity', 'Product Quantity'), ('category_quantity', 'Category Quantity'), ('brand_quantity', 'Brand Quantity'), ('customer_group', 'Customer Group'), ('customer_total_orders', 'Customer Total Orders'), ('customer_lifetime_value', 'Customer Lifetime Value'), ('shipping_country', 'Shipping Country'), ('shipping_state', 'Shipping State'), ('shipping_city', 'Shipping City'), ('payment_method', 'Payment Method'), ('day_of_week', 'Day of Week'), ('time_of_day', 'Time of Day')], max_length=30)),
                ('operator', models.CharField(choices=[('equals', 'Equals'), ('not_equals', 'Not Equals'), ('greater_than', 'Greater Than'), ('greater_than_or_equal', 'Greater Than or Equal'), ('less_than', 'Less Than'), ('less_than_or_equal', 'Less Than or Equal'), ('between', 'Between'), ('in', 'In'), ('not_in', 'Not In'), ('contains', 'Contains'), ('not_contains', 'Does Not Contain')], default='equals', max_length=30)),
                ('value', models.CharField(blank=True, default='', help_text="'min,max' for between; comma separated list for in/not_in", max_length=255)),
                ('metadata', models.JSONField(blank=True, default=dict, help_text="Scope for item rules, e.g. {'product_id': 12}")),
                ('position', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('discount', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rules', to='promotions.discount')),
            ],
            options={
                'verbose_name': 'Promotion Rule',
                'verbose_name_plural': 'Promotion Rules',
                'db_table': 'promotion_rules',
                'ordering': ['position', 'id'],
            },
        ),
        migrations.CreateModel(
            name='CouponUsage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('store_id', models.PositiveBigIntegerField(db_index=True)),
                ('order_id', models.CharField(max_length=64)),
                ('customer_id', models.CharField(blank=True, max_length=64, null=True)),
                ('session_id', models.CharField(blank=True, default='', max_length=100)),
                ('discount_code', models.CharField(max_length=50)),
                ('discount_amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('order_subtotal', models.DecimalField(decimal_places=2, max_digits=12)),
                ('applied_to_items', models.JSONField(blank=True, default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('discount', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='usages', to='promotions.discount')),
            ],
            options={
                'verbose_name': 'Coupon Usage',
                'verbose_name_plural': 'Coupon Usages',
                'db_table': 'promotion_coupon_usages',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['discount', 'customer_id'], name='promo_usage_customer_idx'),
                    models.Index(fields=['order_id'], name='promo_usage_order_idx'),
                ],
            },
        ),
        migrations.AddConstraint(
            model_name='couponusage',
            constraint=models.UniqueConstraint(fields=('order_id', 'discount'), name='unique_usage_per_order_discount'),
        ),
    ]
