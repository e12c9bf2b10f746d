"""Read-only stock source backed by the sqlite catalogue.

Any object offering ``exists``, ``get_details``, ``get_image`` and
``list_all_product_numbers`` with the semantics below can stand in for
``StockReader`` when building a ``CustomerSession``.
"""
import logging
import os
import sqlite3

from PIL import Image, UnidentifiedImageError

from database import get_db
from errors import NotFound, StockLookupError
from models import Product

logger = logging.getLogger(__name__)


class StockReader:

    def __init__(self, db=None):
        self.db = db or get_db()

    def _fetch_one(self, query, params):
        try:
            conn = self.db.connect()
            try:
                return conn.execute(query, params).fetchone()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StockLookupError(f"Stock query failed: {e}") from e

    def exists(self, product_num):
        row = self._fetch_one("SELECT 1 FROM stock WHERE product_num = ?", (product_num,))
        return row is not None

    def get_details(self, product_num):
        row = self._fetch_one(
            "SELECT product_num, description, price, stock_level FROM stock WHERE product_num = ?",
            (product_num,),
        )
        if not row:
            raise NotFound(product_num)
        try:
            return Product(row["product_num"], row["description"], row["price"], row["stock_level"])
        except (TypeError, ValueError) as e:
            raise StockLookupError(f"Malformed stock row for {product_num}: {e}") from e

    def get_image(self, product_num):
        """Return a loaded PIL image for the product, or None when it has none."""
        row = self._fetch_one("SELECT image_path FROM stock WHERE product_num = ?", (product_num,))
        if not row:
            raise NotFound(product_num)
        path = resolve_image_path(row["image_path"])
        if not path:
            return None
        try:
            with Image.open(path) as img:
                img.load()
                return img.copy()
        except (OSError, UnidentifiedImageError) as e:
            logger.warning("Unreadable image %s for product %s: %s", path, product_num, e)
            return None

    def list_all_product_numbers(self):
        try:
            conn = self.db.connect()
            try:
                rows = conn.execute("SELECT product_num FROM stock ORDER BY product_num").fetchall()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StockLookupError(f"Stock query failed: {e}") from e
        return [r["product_num"] for r in rows]


def resolve_image_path(image_path):
    """Find an image file: as stored, then under assets/images next to the code or cwd."""
    if not image_path:
        return None
    if os.path.exists(image_path):
        return image_path
    name = os.path.basename(image_path)
    for base in (os.path.dirname(os.path.abspath(__file__)), os.getcwd()):
        alt = os.path.join(base, "assets", "images", name)
        if os.path.exists(alt):
            return alt
    return None
