import os
import unittest
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from errors import EmptyBasket, NotFound, StockLookupError
from models import Product
from services import CustomerSession, START_PROMPT


class FakeStock:
    """In-memory stand-in for StockReader."""

    def __init__(self, products=None, images=None):
        self.products = {p.product_num: p for p in (products or [])}
        self.images = images or {}
        self.fail = False
        self.fail_on = set()
        self.calls = []

    def _check(self, name, pn):
        self.calls.append((name, pn))
        if self.fail or name in self.fail_on:
            raise StockLookupError('connection refused')

    def exists(self, pn):
        self._check('exists', pn)
        return pn in self.products

    def get_details(self, pn):
        self._check('get_details', pn)
        if pn not in self.products:
            raise NotFound(pn)
        return self.products[pn].copy()

    def get_image(self, pn):
        self._check('get_image', pn)
        return self.images.get(pn)

    def list_all_product_numbers(self):
        self._check('list', None)
        return sorted(self.products)


class SessionTests(unittest.TestCase):
    def setUp(self):
        self.stock = FakeStock(
            [
                Product('0001', 'Widget', 2.50, 4),
                Product('0002', 'Gadget', 10.00, 12),
                Product('P9', 'Sold Out Thing', 5.00, 0),
            ],
            images={'0001': 'widget-image'},
        )
        self.session = CustomerSession(self.stock)
        self.events = []
        self.session.subscribe(lambda s, msg: self.events.append((s, msg)))

    # --- check ---
    def test_check_unknown_product(self):
        self.session.check('ZZZZZ')
        self.assertEqual(self.session.status, 'Unknown product number ZZZZZ')
        self.assertTrue(self.session.basket.is_empty())
        self.assertIsNone(self.session.get_picture())
        self.assertEqual(len(self.events), 1)
        self.assertIs(self.events[0][0], self.session)

    def test_check_out_of_stock(self):
        self.session.check('P9')
        self.assertTrue(self.session.status.endswith('not in stock'))
        self.assertEqual(self.session.status, 'Sold Out Thing not in stock')
        self.assertTrue(self.session.basket.is_empty())
        self.assertEqual(len(self.events), 1)

    def test_check_in_stock_holds_one(self):
        self.session.check('  0001 ')
        self.assertEqual(self.session.product_num, '0001')
        self.assertEqual(self.session.status, 'Widget :    2.50 ( 4) ')
        self.assertEqual(len(self.session.basket), 1)
        self.assertEqual(self.session.basket.get_line('0001').qty, 1)
        self.assertEqual(self.session.get_picture(), 'widget-image')
        self.assertEqual(self.events[-1][1], self.session.status)

    def test_check_discards_previous_selection(self):
        self.session.check('0001')
        self.session.check('0002')
        self.assertEqual([l.product_num for l in self.session.basket], ['0002'])
        self.assertIsNone(self.session.get_picture())

    def test_check_stock_failure_keeps_status_and_still_notifies(self):
        self.session.check('0001')
        before = self.session.status
        self.stock.fail = True
        with self.assertLogs('services', level='ERROR'):
            self.session.check('0002')
        self.assertEqual(self.session.status, before)
        self.assertEqual(len(self.events), 2)
        self.assertTrue(self.session.basket.is_empty())

    # --- clear ---
    def test_clear_resets_prompt_and_picture(self):
        self.session.check('0001')
        self.session.clear()
        self.assertEqual(self.session.product_num, '')
        self.assertIsNone(self.session.product)
        self.assertEqual(self.session.status, START_PROMPT)
        self.assertIsNone(self.session.get_picture())
        self.assertTrue(self.session.basket.is_empty())
        self.session.clear()
        self.assertEqual(len(self.events), 3)

    # --- add / remove ---
    def test_add_to_basket_merges(self):
        self.assertTrue(self.session.add_to_basket('0002', 2))
        self.assertTrue(self.session.add_to_basket('0002', 3))
        self.session.add_to_basket('0001', 1)
        self.assertEqual(len(self.session.basket), 2)
        self.assertEqual(self.session.basket.get_line('0002').qty, 5)
        self.assertEqual(self.session.status, 'Added Widget x 1 to basket')
        self.assertEqual(len(self.events), 3)

    def test_add_to_basket_rejects_non_positive_quantity(self):
        with self.assertLogs('services', level='WARNING'):
            self.assertFalse(self.session.add_to_basket('0002', 0))
        self.assertFalse(self.session.add_to_basket('0002', -1))
        self.assertTrue(self.session.basket.is_empty())
        self.assertEqual(self.events, [])
        self.assertEqual(self.stock.calls, [])

    def test_add_to_basket_unknown_product(self):
        self.session.add_to_basket('0001', 1)
        self.assertFalse(self.session.add_to_basket('NOPE', 1))
        self.assertEqual(self.session.status, 'Product not found: NOPE')
        self.assertEqual(len(self.session.basket), 1)
        self.assertEqual(len(self.events), 2)

    def test_add_to_basket_stock_failure_is_contained(self):
        self.stock.fail = True
        with self.assertLogs('services', level='ERROR'):
            self.assertFalse(self.session.add_to_basket('0002', 1))
        self.assertTrue(self.session.basket.is_empty())
        self.assertEqual(len(self.events), 1)

    def test_add_does_not_clear_existing_lines(self):
        self.session.add_to_basket('0001', 2)
        self.session.add_to_basket('0002', 1)
        self.assertEqual(len(self.session.basket), 2)

    def test_remove_absent_emits_exactly_once(self):
        self.session.remove_from_basket('0001')
        self.assertEqual(len(self.events), 1)
        self.assertTrue(self.session.basket.is_empty())

    def test_remove_present(self):
        self.session.add_to_basket('0001', 2)
        self.session.add_to_basket('0002', 2)
        self.session.remove_from_basket('0001')
        self.assertEqual([l.product_num for l in self.session.basket], ['0002'])

    # --- finalize ---
    def test_finalize_empty_raises_without_notifying(self):
        with self.assertRaises(EmptyBasket):
            self.session.finalize_order()
        self.assertEqual(self.events, [])

    def test_finalize_returns_summary_and_clears(self):
        self.session.add_to_basket('0001', 4)
        self.events.clear()
        summary = self.session.finalize_order()
        self.assertEqual(summary, "Widget - £2.50 x 4 = £10.00\n\nTotal Price: £10.00")
        self.assertTrue(self.session.basket.is_empty())
        self.assertEqual(len(self.events), 1)
        self.assertEqual(self.session.basket.get_order_num(), 0)

    # --- focus / input handling ---
    def test_check_image_failure_keeps_previous_focus(self):
        self.session.check('0002')
        focused = (self.session.product_num, self.session.product, self.session.status)
        self.stock.fail_on.add('get_image')
        with self.assertLogs('services', level='ERROR'):
            self.session.check('0001')
        self.assertEqual((self.session.product_num, self.session.product, self.session.status), focused)
        self.assertEqual(len(self.events), 2)

    def test_add_to_basket_rejects_non_integer_quantity(self):
        with self.assertLogs('services', level='WARNING'):
            self.assertFalse(self.session.add_to_basket('0001', 2.5))
        self.assertFalse(self.session.add_to_basket('0001', True))
        self.assertFalse(self.session.add_to_basket('0001', '2'))
        self.assertTrue(self.session.basket.is_empty())
        self.assertEqual(self.events, [])

    def test_repeated_adds_keep_integer_sum(self):
        self.session.add_to_basket('0001', 2)
        self.session.add_to_basket('0001', 2.5)
        self.session.add_to_basket('0001', 3)
        qty = self.session.basket.get_line('0001').qty
        self.assertEqual(qty, 5)
        self.assertIsInstance(qty, int)

    def test_remove_strips_product_number(self):
        self.session.add_to_basket(' 0001 ', 1)
        self.session.remove_from_basket(' 0001 ')
        self.assertTrue(self.session.basket.is_empty())
        self.assertEqual(self.session.status, 'Removed 0001 from basket')

    def test_product_image(self):
        self.assertEqual(self.session.product_image('0001'), 'widget-image')
        self.stock.fail_on.add('get_image')
        with self.assertLogs('services', level='ERROR'):
            self.assertIsNone(self.session.product_image('0001'))

    # --- misc ---
    def test_available_products(self):
        products = self.session.available_products()
        self.assertEqual([p.product_num for p in products], ['0001', '0002', 'P9'])
        self.assertEqual(products[1].quantity, 12)

    def test_available_products_on_failure_is_empty(self):
        self.stock.fail = True
        with self.assertLogs('services', level='ERROR'):
            self.assertEqual(self.session.available_products(), [])

    def test_request_update_and_unsubscribe(self):
        seen = []

        def handler(session, msg):
            seen.append(msg)

        self.session.subscribe(handler)
        self.session.request_update()
        self.session.unsubscribe(handler)
        self.session.clear()
        self.assertEqual(seen, ['START only'])
        self.assertEqual(len(self.events), 2)

    def test_sessions_share_stock_but_not_baskets(self):
        other = CustomerSession(self.stock)
        self.session.add_to_basket('0001', 1)
        self.assertTrue(other.basket.is_empty())


if __name__ == '__main__':
    unittest.main()
