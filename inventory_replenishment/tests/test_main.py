"""
Tests for the command line entry point.
"""
import io
import json
import os
import tempfile
import unittest
from unittest.mock import patch

from sqlalchemy import inspect

from inventory_replenishment.db import db, session_scope
from inventory_replenishment.main import main, build_parser
from inventory_replenishment.models import Supplier, Product, PurchaseOrder


class TestMain(unittest.TestCase):
    """Test cases for the CLI commands against a SQLite file."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_url = f"sqlite:///{os.path.join(self.temp_dir.name, 'cli.db')}"

    def tearDown(self):
        """Tear down test fixtures."""
        db.session.remove()
        db.engine.dispose()
        self.temp_dir.cleanup()

    def run_cli(self, *argv):
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            code = main(['--db-url', self.db_url] + list(argv))
        return code, stdout.getvalue()

    def seed(self):
        with session_scope() as session:
            supplier = Supplier(name='Acme', lead_time=2)
            session.add(supplier)
            session.add_all([
                Product(name='Bolt', sku='B-1', supplier=supplier, price=2.0,
                        current_stock=1, reorder_point=5, reorder_quantity=10),
                Product(name='Nut', sku='N-1', supplier=supplier, price=1.0,
                        current_stock=40, reorder_point=5)
            ])

    def test_setup_db(self):
        """Test that --setup-db alone creates the schema."""
        code, _ = self.run_cli('--setup-db')

        self.assertEqual(code, 0)
        tables = inspect(db.engine).get_table_names()
        for table in ('suppliers', 'products', 'transactions', 'purchase_orders',
                      'purchase_order_items', 'forecast_data'):
            self.assertIn(table, tables)

    def test_no_command_prints_help(self):
        code, output = self.run_cli()

        self.assertEqual(code, 0)
        self.assertIn('usage', output)

    def test_summary(self):
        self.run_cli('--setup-db')
        self.seed()

        code, output = self.run_cli('summary')

        self.assertEqual(code, 0)
        summary = json.loads(output)
        self.assertEqual(summary['total_products'], 2)
        self.assertEqual(summary['low_stock_count'], 1)

    def test_summary_table(self):
        """Test --table prints a metric table instead of JSON."""
        self.run_cli('--setup-db')
        self.seed()

        code, output = self.run_cli('--table', 'summary')

        self.assertEqual(code, 0)
        self.assertIn('Metric', output)
        self.assertIn('total_products', output)

    def test_forecast(self):
        """Test the forecast command prints one point per day."""
        self.run_cli('--setup-db')
        self.seed()

        code, output = self.run_cli('forecast', '--product-id', '1', '--days', '3', '--seed', '1')

        self.assertEqual(code, 0)
        forecast = json.loads(output)
        self.assertEqual(len(forecast), 3)
        for point in forecast:
            self.assertGreaterEqual(point['demand'], 5.0)
            self.assertLess(point['demand'], 10.0)

    def test_forecast_refresh(self):
        """Test --refresh replaces the stored forecast."""
        self.run_cli('--setup-db')
        self.seed()
        self.run_cli('forecast', '--product-id', '1', '--days', '3')

        code, output = self.run_cli('forecast', '--product-id', '1', '--days', '5', '--refresh')

        self.assertEqual(code, 0)
        self.assertEqual(len(json.loads(output)), 5)

    def test_forecast_longer_horizon_without_refresh(self):
        """Test --days is honoured when a shorter forecast is stored."""
        self.run_cli('--setup-db')
        self.seed()
        self.run_cli('forecast', '--product-id', '1', '--days', '3')

        code, output = self.run_cli('forecast', '--product-id', '1', '--days', '5')

        self.assertEqual(code, 0)
        self.assertEqual(len(json.loads(output)), 5)

    def test_forecast_unknown_product(self):
        self.run_cli('--setup-db')

        code, _ = self.run_cli('forecast', '--product-id', '99')

        self.assertEqual(code, 1)

    def test_auto_replenish(self):
        """Test the auto-replenish command creates orders."""
        self.run_cli('--setup-db')
        self.seed()

        code, output = self.run_cli('auto-replenish', '--user-id', '7')

        self.assertEqual(code, 0)
        results = json.loads(output)
        self.assertEqual(results['message'], "Created 1 purchase orders for 1 products")
        with session_scope() as session:
            order = session.query(PurchaseOrder).one()
            self.assertEqual(order.user_id, 7)
            self.assertAlmostEqual(order.total_value, 20.0)

    def test_reorder_check(self):
        self.run_cli('--setup-db')
        self.seed()

        code, output = self.run_cli('reorder-check', '--product-id', '2')

        self.assertEqual(code, 0)
        decision = json.loads(output)
        self.assertEqual(decision['product_id'], 2)
        self.assertEqual(decision['lead_time_days'], 2)
        self.assertFalse(decision['reorder'])

    def test_parser_defaults(self):
        args = build_parser().parse_args(['reorder-check', '--product-id', '3'])

        self.assertEqual(args.command, 'reorder-check')
        self.assertEqual(args.safety_stock, 0.0)
        self.assertFalse(args.setup_db)


if __name__ == '__main__':
    unittest.main()
