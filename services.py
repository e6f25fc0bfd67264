import logging
import threading

from models import Cart
from products import PersistenceError

log = logging.getLogger("shopping")


class PurchaseError(Exception):
    pass


#Shopping service
class ShoppingService:
    def __init__(self, product_dao):
        self.product_dao = product_dao
        # one cart per customer for as long as this service lives
        self._carts = {}
        self._lock = threading.RLock()

    def get_cart(self, customer):
        with self._lock:
            cart = self._carts.get(customer)
            if cart is None:
                cart = Cart()
                self._carts[customer] = cart
            return cart

    def get_all_products(self):
        return self.product_dao.get_all()

    def get_product_by_name(self, name):
        return self.product_dao.get_by_name(name)

    def buy(self, cart):
        """Commit the cart against the stock held by the DAO.

        Returns False for an empty cart without touching the DAO, True once
        every product has been re-read, decremented and saved. Only the
        purchased quantities leave the cart, and only on success. A failed
        save raises PurchaseError; products saved before it stay saved.
        """
        with self._lock:
            items = cart.get_products()
            if not items:
                return False

            # Validate against stored stock, it may have moved since the add
            stored = []
            for product, qty in items.items():
                current = self.product_dao.get_by_name(product.name)
                if current is None:
                    raise PurchaseError(f"Cannot buy product '{product.name}': no longer sold")
                if current.count < qty:
                    raise PurchaseError(
                        f"Cannot buy product '{product.name}': {qty} requested, {current.count} in stock"
                    )
                stored.append((product, current, qty))

            for product, current, qty in stored:
                current.decrement(qty)
                try:
                    self.product_dao.save(current)
                except PersistenceError as e:
                    # this one never reached storage
                    current.increment(qty)
                    log.error("purchase aborted at %s: %s", product.name, e)
                    raise PurchaseError(f"Purchase failed while saving '{product.name}'") from e
                if current is not product:
                    _sync_count(product, current.count)

            cart.discard(items)
            log.info("purchase completed: %d product(s), %d unit(s)",
                     len(items), sum(items.values()))
            return True


def _sync_count(product, count):
    # bring a caller's copy in line with what was saved
    if product.count > count:
        product.decrement(product.count - count)
    elif product.count < count:
        product.increment(count - product.count)
