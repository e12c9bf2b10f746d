import sys
import os
import logging
from PyQt5.QtWidgets import QApplication
from controller import CustomerController
from database import get_db
from services import CustomerSession
from stock import StockReader
from view import CustomerView
import inserting

logger = logging.getLogger("customer-client")


def prepare_db_and_seed_if_needed(db):
    if db.count_products() == 0:
        logger.info('No products found in DB, seeding the demo catalogue...')
        inserting.seed(db)


def main():
    logging.basicConfig(
        level=os.environ.get("BASKET_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)

    # Prepare DB (create schema and seed if empty) before creating the GUI
    db = get_db()
    prepare_db_and_seed_if_needed(db)

    session = CustomerSession(StockReader(db))
    window = CustomerView()
    controller = CustomerController(session, window)
    session.request_update()
    window.show()

    sys.exit(app.exec_())

if __name__ == "__main__":
    main()
