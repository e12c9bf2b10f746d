#Basket / stock errors


class BasketError(Exception):
    pass


class InvalidArgument(BasketError, ValueError):
    """A caller passed something a basket cannot hold (e.g. no product)."""


class EmptyBasket(BasketError):
    """Finalize was requested on a basket with no lines."""


class StockLookupError(LookupError):
    """The stock source could not be reached or gave a malformed answer."""


class NotFound(StockLookupError):
    """The product number has no catalogue entry."""

    def __init__(self, product_num):
        super().__init__(f"No such product: {product_num}")
        self.product_num = product_num
