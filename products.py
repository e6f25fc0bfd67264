import logging
import sqlite3
from abc import ABC, abstractmethod

from database import commit_with_retry
from models import Product

log = logging.getLogger("shopping")


class PersistenceError(Exception):
    pass


class ProductDao(ABC):
    # Source of truth for product stock. Injected into ShoppingService,
    # which never owns its lifetime.

    @abstractmethod
    def get_all(self):
        pass

    @abstractmethod
    def get_by_name(self, name):
        # Returns None when there is no product with that name.
        pass

    @abstractmethod
    def save(self, product):
        pass


class InMemoryProductDao(ProductDao):
    def __init__(self, products=None):
        self._products = {}
        for p in products or []:
            self._products[p.name] = p

    def get_all(self):
        return list(self._products.values())

    def get_by_name(self, name):
        return self._products.get(name)

    def save(self, product):
        self._products[product.name] = product


class SqliteProductDao(ProductDao):
    def __init__(self, manager):
        self.manager = manager

    def get_all(self):
        conn = self.manager.connect()
        try:
            rows = conn.execute("SELECT name, count FROM products ORDER BY name").fetchall()
        finally:
            conn.close()
        return [Product(r["name"], r["count"]) for r in rows]

    def get_by_name(self, name):
        conn = self.manager.connect()
        try:
            row = conn.execute("SELECT name, count FROM products WHERE name = ?", (name,)).fetchone()
        finally:
            conn.close()
        if not row:
            return None
        return Product(row["name"], row["count"])

    def save(self, product):
        try:
            conn = self.manager.connect()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot save product '{product.name}': {e}") from e
        try:
            conn.execute(
                "INSERT INTO products (name, count) VALUES (?, ?) "
                "ON CONFLICT(name) DO UPDATE SET count = excluded.count",
                (product.name, product.count)
            )
            commit_with_retry(conn)
        except sqlite3.Error as e:
            log.error("save failed for %s: %s", product.name, e)
            raise PersistenceError(f"Cannot save product '{product.name}': {e}") from e
        finally:
            conn.close()
