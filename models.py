from decimal import Decimal, ROUND_HALF_UP

from errors import InvalidArgument

CURRENCY = "£"

# Basket.add outcomes
MERGED = "merged"
INSERTED = "inserted"

_CENTS = Decimal("0.01")


def to_price(value):
    """Coerce a float/int/str/Decimal price into a Decimal.

    Floats go through ``str`` so 2.5 stays 2.5 instead of its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def money(value):
    """Round for display only (half-up, two places)."""
    return to_price(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def is_count(value):
    """True for whole-number quantities; bools and floats do not count."""
    return isinstance(value, int) and not isinstance(value, bool)


#product model
class Product:
    def __init__(self, product_num, description, price, quantity):
        if not product_num:
            raise InvalidArgument("Product number must not be empty")
        price = to_price(price)
        if price < 0:
            raise InvalidArgument(f"Negative price for {product_num}: {price}")
        if not is_count(quantity):
            raise InvalidArgument(f"Quantity for {product_num} must be an integer, got {quantity!r}")
        if quantity < 0:
            raise InvalidArgument(f"Negative quantity for {product_num}: {quantity}")
        self.product_num = product_num
        self.description = description
        self.price = price
        self.quantity = quantity

    def copy(self):
        return Product(self.product_num, self.description, self.price, self.quantity)

    def __eq__(self, other):
        if not isinstance(other, Product):
            return NotImplemented
        return (self.product_num, self.description, self.price, self.quantity) == \
            (other.product_num, other.description, other.price, other.quantity)

    def __repr__(self):
        return f"Product({self.product_num!r}, {self.description!r}, {self.price}, {self.quantity})"


#basket line model
class BasketLine:
    def __init__(self, product, qty):
        # the line owns its own record, independent of whatever the caller holds
        self.product = Product(product.product_num, product.description, product.price, qty)

    @property
    def product_num(self):
        return self.product.product_num

    @property
    def description(self):
        return self.product.description

    @property
    def price(self):
        return self.product.price

    @property
    def qty(self):
        return self.product.quantity

    @qty.setter
    def qty(self, value):
        self.product.quantity = value

    @property
    def total(self):
        return self.product.price * self.qty


#basket model
class Basket:
    """Products a customer wishes to buy, at most one line per product number.

    Valid order numbers are 1 .. N; 0 means none has been assigned yet.
    """

    def __init__(self):
        self.lines = []
        self._order_num = 0

    def add(self, product, qty=None):
        if product is None:
            raise InvalidArgument("Cannot add a null product to the basket.")
        if qty is None:
            qty = 1
        if not is_count(qty):
            raise InvalidArgument(f"Quantity must be an integer, got {qty!r}")
        if qty <= 0:
            qty = 1

        for line in self.lines:
            if line.product_num == product.product_num:
                line.qty += qty
                return MERGED

        self.lines.append(BasketLine(product, qty))
        return INSERTED

    def remove(self, product_num):
        self.lines = [line for line in self.lines if line.product_num != product_num]

    def clear(self):
        self.lines = []

    def get_line(self, product_num):
        for line in self.lines:
            if line.product_num == product_num:
                return line
        return None

    def is_empty(self):
        return not self.lines

    def __len__(self):
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __contains__(self, product_num):
        return self.get_line(product_num) is not None

    @property
    def order_num(self):
        return self._order_num

    def set_order_num(self, order_num):
        self._order_num = order_num

    def get_order_num(self):
        return self._order_num

    @property
    def total(self):
        return sum((line.total for line in self.lines), Decimal("0"))

    def get_details(self):
        """Printable description of the basket, one line per product plus a total."""
        out = []
        for line in self.lines:
            out.append(
                f"{line.description} - {CURRENCY}{money(line.price)} x {line.qty}"
                f" = {CURRENCY}{money(line.total)}\n"
            )
        out.append(f"\nTotal Price: {CURRENCY}{money(self.total)}")
        return "".join(out)
