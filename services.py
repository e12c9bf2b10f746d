#Customer session service
import logging

from PyQt5.QtCore import QObject, pyqtSignal

from errors import EmptyBasket, StockLookupError
from models import Basket, is_count

logger = logging.getLogger(__name__)

START_PROMPT = "Enter Product Number"


class CustomerSession(QObject):
    """One customer's browsing / ordering session.

    Drives a Basket against an injected stock source (``exists``,
    ``get_details``, ``get_image``, ``list_all_product_numbers``) and emits
    ``changed(session, message)`` after every state-affecting call. Handlers
    are invoked synchronously; they read the basket and status back from the
    session, the message is informational only.
    """

    changed = pyqtSignal(object, object)

    def __init__(self, stock, parent=None):
        super().__init__(parent)
        self.stock = stock
        self.basket = self.make_basket()
        self.product_num = ""
        self.product = None
        self.picture = None
        self.status = START_PROMPT

    def make_basket(self):
        return Basket()

    # --- OBSERVERS ---
    def subscribe(self, handler):
        self.changed.connect(handler)

    def unsubscribe(self, handler):
        self.changed.disconnect(handler)

    def _notify(self, message=None):
        self.changed.emit(self, message)

    def request_update(self):
        """Ask observers to redraw; used by the display when it first appears."""
        self._notify("START only")

    # --- STATE ---
    def get_basket(self):
        return self.basket

    def get_picture(self):
        return self.picture

    # --- USE CASES ---
    def check(self, product_num):
        """Look a single product up and hold one of it if it is in stock.

        A stock fault leaves the focused product, status and picture as they were.
        """
        self.basket.clear()
        product_num = (product_num or "").strip()
        amount = 1
        try:
            if self.stock.exists(product_num):
                pr = self.stock.get_details(product_num)
                if pr.quantity >= amount:
                    picture = self.stock.get_image(product_num)
                    status = f"{pr.description} : {pr.price:7.2f} ({pr.quantity:2d}) "
                    held = pr.copy()
                    held.quantity = amount
                    self.basket.add(held, amount)
                else:
                    picture = None
                    status = f"{pr.description} not in stock"
            else:
                pr = None
                picture = None
                status = f"Unknown product number {product_num}"
        except StockLookupError as e:
            logger.error("CustomerSession.check(%s): %s", product_num, e)
        else:
            self.product_num = product_num
            self.product = pr
            self.picture = picture
            self.status = status
        self._notify(self.status)

    def clear(self):
        self.basket.clear()
        self.product_num = ""
        self.product = None
        self.status = START_PROMPT
        self.picture = None
        self._notify(self.status)

    def add_to_basket(self, product_num, quantity):
        """Add ``quantity`` of a product to the order being built, merging repeats.

        Anything but a positive whole number is rejected here (logged, nothing emitted).
        """
        if not is_count(quantity) or quantity <= 0:
            logger.warning("Invalid quantity specified for %s: %r", product_num, quantity)
            return False
        product_num = (product_num or "").strip()
        try:
            if not self.stock.exists(product_num):
                logger.info("Product not found in stock: %s", product_num)
                self.status = f"Product not found: {product_num}"
                self._notify(self.status)
                return False
            product = self.stock.get_details(product_num)
        except StockLookupError as e:
            logger.error("CustomerSession.add_to_basket(%s): %s", product_num, e)
            self._notify(self.status)
            return False

        product.quantity = quantity
        outcome = self.basket.add(product, quantity)
        logger.info("Added to basket (%s): %s x %d", outcome, product.description, quantity)
        self.status = f"Added {product.description} x {quantity} to basket"
        self._notify(self.status)
        return True

    def remove_from_basket(self, product_num):
        product_num = (product_num or "").strip()
        self.basket.remove(product_num)
        self.status = f"Removed {product_num} from basket"
        self._notify(self.status)

    def finalize_order(self):
        """Commit the basket: return its summary, then empty it.

        Raises EmptyBasket (without notifying) when there is nothing to send.
        """
        if self.basket.is_empty():
            raise EmptyBasket("Basket is empty. Nothing to send.")
        summary = self.basket.get_details()
        logger.info("Sending basket with %d line(s)", len(self.basket))
        self.basket.clear()
        self.picture = None
        self.status = "Order sent"
        self._notify(self.status)
        return summary

    def available_products(self):
        """Every catalogue product with its current stock level."""
        products = []
        try:
            for product_num in self.stock.list_all_product_numbers():
                products.append(self.stock.get_details(product_num))
        except StockLookupError as e:
            logger.error("CustomerSession.available_products: %s", e)
        return products

    def product_image(self, product_num):
        """Picture for a catalogue entry, or None when it has none or cannot be fetched."""
        try:
            return self.stock.get_image(product_num)
        except StockLookupError as e:
            logger.error("CustomerSession.product_image(%s): %s", product_num, e)
            return None
