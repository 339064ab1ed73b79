"""
Access to the PROMOTIONS settings dict with defaults.
"""
from django.conf import settings
from django.utils.module_loading import import_string


DEFAULTS = {
    'CUSTOMER_PROVIDER': 'apps.promotions.services.providers.StaticCustomerProvider',
    'CART_STORE': 'apps.promotions.services.providers.InMemoryCartStore',
    'DEFAULT_SUCCESS_MESSAGE': 'Coupon applied successfully!',
    'FREE_GIFT_MESSAGE': 'You qualify for a free gift!',
}


def get_setting(name):
    """Read a PROMOTIONS setting, falling back to the package default"""
    user_settings = getattr(settings, 'PROMOTIONS', None) or {}
    return user_settings.get(name, DEFAULTS[name])


def get_customer_provider():
    return import_string(get_setting('CUSTOMER_PROVIDER'))()


def get_cart_store():
    return import_string(get_setting('CART_STORE'))()
