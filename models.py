import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType

log = logging.getLogger("shopping")


class CartItemNotFoundError(LookupError):
    pass


#product model
class Product:
    def __init__(self, name, count=0):
        if count < 0:
            raise ValueError(f"Product '{name}' cannot have negative stock")
        self.name = name
        self._count = count

    @property
    def count(self):
        return self._count

    def increment(self, amount=1):
        if amount < 0:
            raise ValueError("Amount must be non-negative")
        self._count += amount

    def decrement(self, amount=1):
        if amount < 0:
            raise ValueError("Amount must be non-negative")
        if amount > self._count:
            raise ValueError(f"Product '{self.name}' has only {self._count} in stock")
        self._count -= amount

    # products are keyed by name in carts and DAOs
    def __eq__(self, other):
        if not isinstance(other, Product):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"Product({self.name!r}, {self._count})"


#customer model
@dataclass(frozen=True)
class Customer:
    id: int
    phone: str


#cart model
class Cart:
    def __init__(self):
        self._items = {}
        self._lock = threading.RLock()

    def _check_quantity(self, product, quantity):
        if quantity < 0:
            raise ValueError("Quantity must be non-negative")
        if quantity > product.count:
            raise ValueError(f"Cannot add product '{product.name}' to cart: insufficient stock")

    def add(self, product, quantity):
        """Add `quantity` of `product`, on top of whatever is already requested.

        The running total for a product may not exceed its current stock.
        Nothing is reserved on the product itself.
        """
        if quantity < 0:
            raise ValueError("Quantity must be non-negative")
        with self._lock:
            requested = self._items.get(product, 0) + quantity
            self._check_quantity(product, requested)
            self._items[product] = requested
            log.info("cart: added %s x %d", product.name, quantity)

    def edit(self, product, quantity):
        with self._lock:
            if product not in self._items:
                raise CartItemNotFoundError(f"Product '{product.name}' is not in the cart")
            self._check_quantity(product, quantity)
            if quantity == 0:
                del self._items[product]
            else:
                self._items[product] = quantity

    def remove(self, product):
        with self._lock:
            if product not in self._items:
                raise CartItemNotFoundError(f"Product '{product.name}' is not in the cart")
            del self._items[product]

    def clear(self):
        with self._lock:
            self._items.clear()

    def discard(self, purchased):
        """Take `purchased` (product -> quantity) out of the cart.

        Entries added after the purchase was snapshotted stay in the cart.
        """
        with self._lock:
            for product, qty in purchased.items():
                left = self._items.get(product, 0) - qty
                if left > 0:
                    self._items[product] = left
                else:
                    self._items.pop(product, None)

    def get_products(self):
        with self._lock:
            return MappingProxyType(dict(self._items))

    def is_empty(self):
        with self._lock:
            return not self._items

    @property
    def total_quantity(self):
        with self._lock:
            return sum(self._items.values())

    def __len__(self):
        with self._lock:
            return len(self._items)

    def __contains__(self, product):
        with self._lock:
            return product in self._items
