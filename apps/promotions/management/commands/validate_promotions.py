from django.core.management.base import BaseCommand

from apps.promotions.exceptions import InvalidTargetConfig
from apps.promotions.models import Discount
from apps.promotions.services.promotion_engine import log_config_error


class Command(BaseCommand):
    help = 'Report advanced promotions whose target_config cannot be parsed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--store-id',
            type=int,
            help='Only check discounts of this store',
        )

    def handle(self, *args, **options):
        store_id = options.get('store_id')

        discounts = Discount.objects.exclude(promotion_type__isnull=True).exclude(promotion_type='')
        if store_id is not None:
            discounts = discounts.for_store(store_id)

        self.stdout.write(f'Checking {discounts.count()} advanced promotion(s)...')

        invalid = 0
        for discount in discounts.order_by('store_id', 'priority', 'id'):
            try:
                discount.promotion_config
            except InvalidTargetConfig as exc:
                invalid += 1
                log_config_error(discount, exc)
                self.stdout.write(
                    self.style.ERROR(f'[store {discount.store_id}] {discount.code}: {exc}')
                )

        if invalid:
            self.stdout.write(self.style.WARNING(f'{invalid} promotion(s) have an invalid target_config'))
        else:
            self.stdout.write(self.style.SUCCESS('All promotion configurations are valid'))
