from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QLineEdit,
    QTextEdit, QSpinBox, QSizePolicy, QFrame, QGridLayout, QScrollArea
)
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPixmap, QImage

from models import CURRENCY, money

EMPTY_BASKET_TEXT = "Your basket is empty."


def pil_to_pixmap(image):
    """Convert a PIL image into a QPixmap (None passes through)."""
    if image is None:
        return None
    rgba = image.convert('RGBA')
    data = rgba.tobytes('raw', 'RGBA')
    qimg = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format_RGBA8888)
    # copy so the pixmap does not point into `data` after it is collected
    return QPixmap.fromImage(qimg.copy())


class ProductTile(QFrame):
    add_clicked = pyqtSignal(str, int)  # product number, quantity

    def __init__(self, product, image=None):
        super().__init__()
        self.setObjectName("ProductTile")
        self.product_num = product.product_num
        self.setFixedSize(220, 280)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)

        layout = QVBoxLayout()
        layout.setContentsMargins(8, 8, 8, 8)

        self.img_lbl = QLabel()
        self.img_lbl.setObjectName("ProductImage")
        self.img_lbl.setAlignment(Qt.AlignCenter)
        self.img_lbl.setFixedHeight(120)
        pix = pil_to_pixmap(image)
        if pix is None or pix.isNull():
            self.img_lbl.setText("No Image Available")
        else:
            self.img_lbl.setPixmap(pix.scaled(200, 120, Qt.KeepAspectRatio, Qt.SmoothTransformation))

        name_lbl = QLabel(f"{product.description} - {CURRENCY}{money(product.price)}")
        name_lbl.setObjectName("ProductName")
        name_lbl.setWordWrap(True)

        # the spinner cannot ask for more than is on the shelf
        qty_row = QHBoxLayout()
        self.spin_qty = QSpinBox()
        self.spin_qty.setRange(1, max(1, product.quantity))
        self.spin_qty.setValue(1)
        qty_row.addWidget(QLabel("Quantity:"))
        qty_row.addWidget(self.spin_qty)

        self.btn_add = QPushButton("Add to Basket")
        self.btn_add.clicked.connect(self._on_add)
        if product.quantity < 1:
            self.spin_qty.setEnabled(False)
            self.btn_add.setEnabled(False)
            self.btn_add.setText("Out of stock")

        layout.addWidget(self.img_lbl)
        layout.addWidget(name_lbl)
        layout.addLayout(qty_row)
        layout.addWidget(self.btn_add)
        self.setLayout(layout)

    def _on_add(self):
        self.add_clicked.emit(self.product_num, self.spin_qty.value())


class ProductPanel(QWidget):
    """Window listing the whole catalogue as a grid of tiles."""

    add_requested = pyqtSignal(str, int)
    COLUMNS = 2

    def __init__(self):
        super().__init__()
        self.setObjectName("ProductPanel")
        self.setWindowTitle("Product Selection")
        self.resize(600, 400)
        self.tiles = []

        self.grid_layout = QGridLayout()
        self.grid_layout.setSpacing(12)
        grid_widget = QWidget()
        grid_widget.setLayout(self.grid_layout)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(grid_widget)

        self.empty_lbl = QLabel("No products available.")
        self.empty_lbl.setAlignment(Qt.AlignCenter)

        layout = QVBoxLayout()
        layout.addWidget(self.empty_lbl)
        layout.addWidget(scroll, 1)
        self.setLayout(layout)

    def populate(self, entries):
        """Rebuild the grid from (product, image) pairs."""
        for tile in self.tiles:
            self.grid_layout.removeWidget(tile)
            tile.deleteLater()
        self.tiles = []

        for i, (product, image) in enumerate(entries):
            tile = ProductTile(product, image)
            tile.add_clicked.connect(self.add_requested.emit)
            self.grid_layout.addWidget(tile, i // self.COLUMNS, i % self.COLUMNS)
            self.tiles.append(tile)
        self.empty_lbl.setVisible(not self.tiles)


class CustomerView(QWidget):
    # Signals to Controller
    check_requested = pyqtSignal(str)  # product number
    clear_requested = pyqtSignal()
    add_requested = pyqtSignal(str, int)  # product number, quantity
    remove_requested = pyqtSignal(str)
    send_requested = pyqtSignal()
    browse_requested = pyqtSignal()

    def __init__(self):
        super().__init__()
        self.setObjectName("CustomerView")
        self.setWindowTitle("Customer Client")
        self.resize(600, 460)

        main_layout = QVBoxLayout()

        # 1. Header
        header = QLabel("<b>Customer Shopping Application</b>")
        header.setObjectName("Header")
        header.setAlignment(Qt.AlignCenter)

        # 2. Entry row
        entry_row = QHBoxLayout()
        self.input_pn = QLineEdit()
        self.input_pn.setPlaceholderText("Product number")
        self.input_pn.setMinimumHeight(36)
        self.input_pn.returnPressed.connect(self._on_check)

        self.spin_qty = QSpinBox()
        self.spin_qty.setRange(1, 999)
        self.spin_qty.setValue(1)

        btn_check = QPushButton("Check")
        btn_check.clicked.connect(self._on_check)
        btn_clear = QPushButton("Clear")
        btn_clear.clicked.connect(self.clear_requested.emit)

        entry_row.addWidget(self.input_pn, 1)
        entry_row.addWidget(QLabel("Qty:"))
        entry_row.addWidget(self.spin_qty)
        entry_row.addWidget(btn_check)
        entry_row.addWidget(btn_clear)

        # 3. Status + picture + basket
        self.status_lbl = QLabel("")
        self.status_lbl.setObjectName("Status")
        self.status_lbl.setWordWrap(True)

        body = QHBoxLayout()
        self.picture_lbl = QLabel()
        self.picture_lbl.setObjectName("ProductImage")
        self.picture_lbl.setAlignment(Qt.AlignCenter)
        self.picture_lbl.setFixedSize(180, 140)

        self.basket_text = QTextEdit()
        self.basket_text.setReadOnly(True)
        self.basket_text.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.basket_text.setPlainText(EMPTY_BASKET_TEXT)

        body.addWidget(self.picture_lbl)
        body.addWidget(self.basket_text, 1)

        # 4. Basket actions
        actions = QHBoxLayout()
        btn_add = QPushButton("Add to Basket")
        btn_add.clicked.connect(self._on_add)
        btn_remove = QPushButton("Remove")
        btn_remove.clicked.connect(self._on_remove)
        btn_send = QPushButton("Send Basket")
        btn_send.setObjectName("SendButton")
        btn_send.clicked.connect(self.send_requested.emit)
        btn_browse = QPushButton("Select Products")
        btn_browse.clicked.connect(self.browse_requested.emit)
        actions.addWidget(btn_add)
        actions.addWidget(btn_remove)
        actions.addStretch(1)
        actions.addWidget(btn_browse)
        actions.addWidget(btn_send)

        main_layout.addWidget(header)
        main_layout.addLayout(entry_row)
        main_layout.addWidget(self.status_lbl)
        main_layout.addLayout(body, 1)
        main_layout.addLayout(actions)
        self.setLayout(main_layout)

        # Catalogue window, built once and refilled on each browse
        self.product_panel = ProductPanel()
        self.product_panel.add_requested.connect(self.add_requested.emit)

    def show_catalogue(self, entries):
        """Fill the product selection window with (product, image) pairs and raise it."""
        self.product_panel.populate(entries)
        self.product_panel.show()
        self.product_panel.raise_()

    def _product_num(self):
        return self.input_pn.text().strip()

    def _on_check(self):
        self.check_requested.emit(self._product_num())

    def _on_add(self):
        self.add_requested.emit(self._product_num(), self.spin_qty.value())

    def _on_remove(self):
        self.remove_requested.emit(self._product_num())

    def update_view(self, session, message=None):
        """Redraw from the session; connected to CustomerSession.changed.

        Everything is pulled from the session, the message is not needed.
        """
        self.status_lbl.setText(session.status)

        basket = session.get_basket()
        if basket is not None and not basket.is_empty():
            self.basket_text.setPlainText(basket.get_details())
        else:
            self.basket_text.setPlainText(EMPTY_BASKET_TEXT)

        pix = pil_to_pixmap(session.get_picture())
        if pix is None or pix.isNull():
            self.picture_lbl.clear()
        else:
            self.picture_lbl.setPixmap(pix.scaled(self.picture_lbl.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation))
