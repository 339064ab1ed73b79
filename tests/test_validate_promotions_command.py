"""
Tests for the validate_promotions management command.
"""
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from apps.promotions.models import Discount
from tests.factories import DiscountFactory


class ValidatePromotionsCommandTest(TestCase):

    def call(self, *args):
        out = StringIO()
        call_command('validate_promotions', *args, stdout=out)
        return out.getvalue()

    def test_all_valid(self):
        DiscountFactory(promotion_type=Discount.PROMOTION_BUY_X_GET_Y, target_config={'buy_quantity': 2})
        DiscountFactory()

        output = self.call()

        self.assertIn('Checking 1 advanced promotion(s)', output)
        self.assertIn('All promotion configurations are valid', output)

    def test_reports_invalid_configs(self):
        DiscountFactory(code='BADTIER', promotion_type=Discount.PROMOTION_TIERED,
                        target_config={'tiers': 'not a list'})
        DiscountFactory(code='ODDTYPE', promotion_type='mystery', store_id=2)

        with self.assertLogs('apps.promotions', level='WARNING'):
            output = self.call()

        self.assertIn('BADTIER', output)
        self.assertIn('ODDTYPE', output)
        self.assertIn('2 promotion(s) have an invalid target_config', output)

    def test_store_filter(self):
        DiscountFactory(code='BADTIER', promotion_type=Discount.PROMOTION_TIERED,
                        target_config={'tiers': 'not a list'}, store_id=1)

        output = self.call('--store-id', '2')

        self.assertIn('Checking 0 advanced promotion(s)', output)
        self.assertNotIn('BADTIER', output)
