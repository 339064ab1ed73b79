"""
Collaborators the coupon service depends on but does not own.

Real deployments point settings.PROMOTIONS at their own implementations;
the in-process ones here back development and tests.
"""
import logging

from .context import CustomerSnapshot

logger = logging.getLogger(__name__)


class CustomerProvider:
    """Looks up the customer facts promotions need"""

    def get_customer(self, customer_id):
        """Return a CustomerSnapshot, or None if the customer is unknown"""
        raise NotImplementedError


class CartStore:
    """Persists a cart's applied discount codes"""

    def save(self, cart):
        raise NotImplementedError


class StaticCustomerProvider(CustomerProvider):
    """Mapping-backed provider; values may be CustomerSnapshot or plain dicts"""

    def __init__(self, customers=None):
        self.customers = {}
        for customer_id, customer in (customers or {}).items():
            self.add(customer_id, customer)

    def add(self, customer_id, customer):
        if not isinstance(customer, CustomerSnapshot):
            customer = CustomerSnapshot.from_payload({'id': customer_id, **customer})
        self.customers[str(customer_id)] = customer

    def get_customer(self, customer_id):
        if customer_id is None:
            return None
        return self.customers.get(str(customer_id))


class InMemoryCartStore(CartStore):
    """Keeps the latest discount code list per cart id"""

    def __init__(self):
        self.saved = {}

    def save(self, cart):
        self.saved[cart.id] = list(cart.discount_codes)
        logger.debug(f"Saved discount codes {cart.discount_codes} for cart {cart.id}")

    def get_codes(self, cart_id):
        return list(self.saved.get(cart_id, []))
