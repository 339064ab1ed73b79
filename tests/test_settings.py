"""
Tests for project settings and the PROMOTIONS settings accessor.
"""
from django.conf import settings as django_settings

from apps.promotions.conf import DEFAULTS, get_setting, get_cart_store, get_customer_provider
from apps.promotions.services import InMemoryCartStore, StaticCustomerProvider


def test_installed_apps_are_minimal():
    assert django_settings.INSTALLED_APPS == ['rest_framework', 'apps.promotions']


def test_missing_keys_fall_back_to_defaults(settings):
    settings.PROMOTIONS = {'FREE_GIFT_MESSAGE': 'Gift unlocked'}
    assert get_setting('FREE_GIFT_MESSAGE') == 'Gift unlocked'
    assert get_setting('DEFAULT_SUCCESS_MESSAGE') == DEFAULTS['DEFAULT_SUCCESS_MESSAGE']


def test_providers_are_loaded_by_dotted_path():
    assert isinstance(get_customer_provider(), StaticCustomerProvider)
    assert isinstance(get_cart_store(), InMemoryCartStore)
