import argparse

from database import DatabaseManager, DB_NAME, commit_with_retry
from logger import setup_logger
from products import SqliteProductDao

# Demo stock (name, count)
PRODUCTS = [
    ("Bottled Water", 200),
    ("Chocolate Bar", 80),
    ("Cola Zero", 100),
    ("Potato Chips", 30),
    ("Spaghetti", 25),
    ("Tuna Sandwich", 25),
    ("Umbrella", 10),
]


def seed(manager, products=PRODUCTS):
    """Insert the demo products. Existing names are left untouched.

    Returns the number of rows inserted.
    """
    conn = manager.connect()
    try:
        c = conn.cursor()
        inserted = 0
        for name, count in products:
            c.execute("INSERT OR IGNORE INTO products (name, count) VALUES (?, ?)", (name, count))
            inserted += c.rowcount
        commit_with_retry(conn)
    finally:
        conn.close()
    return inserted


def list_stock(manager):
    # Lines of "<name>: <count>", ordered by name
    return [f"{p.name}: {p.count}" for p in SqliteProductDao(manager).get_all()]


def build_parser():
    parser = argparse.ArgumentParser(description="Manage the shopping product database")
    parser.add_argument('--db', default=DB_NAME,
                        help='SQLite database file (default: %(default)s, override with $SHOPPING_DB)')
    parser.add_argument('--seed', action='store_true', help='Insert demo products')
    parser.add_argument('--list', action='store_true', help='Print current stock')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logger = setup_logger()
    manager = DatabaseManager(db_name=args.db)

    # Default to seeding when no flags provided
    if args.seed or not args.list:
        n = seed(manager)
        logger.info("seeded %d product(s) into %s", n, args.db)
    if args.list:
        for line in list_stock(manager):
            print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
