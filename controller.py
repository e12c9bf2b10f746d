from PyQt5.QtWidgets import QMessageBox

from errors import EmptyBasket


class CustomerController:
    """Passes the customer's intents from the view to the session."""

    def __init__(self, session, view):
        self.session = session
        self.view = view

        # Connect Signals
        self.view.check_requested.connect(self.do_check)
        self.view.clear_requested.connect(self.do_clear)
        self.view.add_requested.connect(self.add_to_order)
        self.view.remove_requested.connect(self.remove_from_basket)
        self.view.send_requested.connect(self.send_basket)
        self.view.browse_requested.connect(self.open_catalogue)

        self.session.subscribe(self.view.update_view)

    def do_check(self, product_num):
        self.session.check(product_num)

    def do_clear(self):
        self.session.clear()

    def add_to_order(self, product_num, quantity):
        self.session.add_to_basket(product_num, quantity)

    def remove_from_basket(self, product_num):
        self.session.remove_from_basket(product_num)

    def open_catalogue(self):
        products = self.session.available_products()
        if not products:
            QMessageBox.information(self.view, "Info", "No products available.")
            return []
        entries = [(p, self.session.product_image(p.product_num)) for p in products]
        self.view.show_catalogue(entries)
        return entries

    def send_basket(self):
        try:
            summary = self.session.finalize_order()
        except EmptyBasket:
            QMessageBox.warning(self.view, "Error", "Your basket is empty.")
            return None
        QMessageBox.information(self.view, "Basket Sent", "Order Details:\n\n" + summary)
        return summary
