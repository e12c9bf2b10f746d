import sqlite3
import os

# Use a DB file located next to this module so the client uses a consistent
# catalogue regardless of the current working directory when launched.
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DB_NAME = os.environ.get("BASKET_DB_PATH") or os.path.join(BASE_DIR, "catalogue.db")

class DatabaseManager:
    def __init__(self, db_name=None):
        self.db_name = db_name or DB_NAME
        self.check_schema()

    def connect(self):
        # Wait for locks rather than failing straight away when the seeding
        # tool and the client touch the file at the same time.
        conn = sqlite3.connect(self.db_name, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def check_schema(self):
        conn = self.connect()
        try:
            c = conn.cursor()
            c.execute('PRAGMA busy_timeout = 30000')

            # Catalogue: one row per product number
            c.execute('''CREATE TABLE IF NOT EXISTS stock (
                product_num TEXT PRIMARY KEY,
                description TEXT NOT NULL,
                price REAL NOT NULL CHECK (price >= 0),
                stock_level INTEGER NOT NULL CHECK (stock_level >= 0),
                image_path TEXT
            )''')

            conn.commit()
        finally:
            conn.close()

    def count_products(self):
        conn = self.connect()
        try:
            return conn.execute('SELECT COUNT(*) FROM stock').fetchone()[0]
        finally:
            conn.close()

_db = None

def get_db():
    """Shared manager for the default catalogue file, created on first use."""
    global _db
    if _db is None:
        _db = DatabaseManager()
    return _db
