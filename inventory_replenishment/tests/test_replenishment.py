"""
Unit tests for reorder calculations.
"""
import re
import unittest
from datetime import datetime

import numpy as np

from inventory_replenishment.core.demand_forecast import ForecastPoint
from inventory_replenishment.core.replenishment import (
    calculate_reorder_quantity,
    needs_reordering,
    is_low_stock,
    determine_order_quantity,
    calculate_order_value,
    evaluate_reorder,
    generate_order_number
)


def make_points(demands):
    return [
        ForecastPoint(date=datetime(2024, 1, 7 + i), demand=demand)
        for i, demand in enumerate(demands)
    ]


class TestStockChecks(unittest.TestCase):
    """Test cases for stock level checks."""

    def test_needs_reordering_at_reorder_point(self):
        """Test stock equal to the reorder point needs reordering."""
        self.assertTrue(needs_reordering(10, 10))
        self.assertTrue(needs_reordering(3, 10))
        self.assertFalse(needs_reordering(11, 10))

    def test_is_low_stock_is_strict(self):
        """Test low stock means strictly below the reorder point."""
        self.assertFalse(is_low_stock(10, 10))
        self.assertTrue(is_low_stock(9.5, 10))
        self.assertFalse(is_low_stock(0, None))

    def test_calculate_reorder_quantity(self):
        """Test lead time coverage plus safety stock."""
        self.assertEqual(calculate_reorder_quantity(4, 3), 12)
        self.assertEqual(calculate_reorder_quantity(4, 3, safety_stock=5), 17)


class TestDetermineOrderQuantity(unittest.TestCase):
    """Test cases for order quantity selection."""

    def test_uses_reorder_quantity(self):
        self.assertEqual(determine_order_quantity(25, 100, 5), 25)

    def test_tops_up_to_max_stock(self):
        """Test the top-up when no reorder quantity is set."""
        self.assertEqual(determine_order_quantity(0, 100, 5), 95)
        self.assertEqual(determine_order_quantity(None, 40, 15), 25)

    def test_default_quantity(self):
        """Test the fallback when neither option gives a positive amount."""
        self.assertEqual(determine_order_quantity(None, None, 5), 10)
        self.assertEqual(determine_order_quantity(0, 5, 5), 10)
        self.assertEqual(determine_order_quantity(-3, 4, 8), 10)
        self.assertEqual(determine_order_quantity(None, None, 5, default=12), 12)

    def test_calculate_order_value(self):
        self.assertEqual(calculate_order_value(4, 2.5), 10.0)


class TestEvaluateReorder(unittest.TestCase):
    """Test cases for forecast-based reorder evaluation."""

    def test_no_reorder_when_stock_covers_lead_time(self):
        """Test projected stock above the reorder point."""
        decision = evaluate_reorder(20, 10, make_points([2, 3, 4, 5]), 3)

        self.assertEqual(decision['lead_time_days'], 3)
        self.assertAlmostEqual(decision['lead_time_demand'], 9.0)
        self.assertAlmostEqual(decision['projected_stock'], 11.0)
        self.assertFalse(decision['reorder'])
        self.assertEqual(decision['suggested_quantity'], 0.0)

    def test_reorder_with_suggested_quantity(self):
        """Test the suggestion restores the reorder point after lead time demand."""
        decision = evaluate_reorder(15, 10, make_points([2, 3, 4, 5]), 3)

        self.assertTrue(decision['reorder'])
        self.assertAlmostEqual(decision['projected_stock'], 6.0)
        self.assertAlmostEqual(decision['suggested_quantity'], 4.0)

    def test_safety_stock_increases_suggestion(self):
        decision = evaluate_reorder(15, 10, make_points([2, 3, 4, 5]), 3, safety_stock=2)

        self.assertAlmostEqual(decision['suggested_quantity'], 6.0)

    def test_accepts_dict_points(self):
        """Test forecast points given as dictionaries."""
        points = [{'date': datetime(2024, 1, 7), 'demand': 6.0}, {'date': datetime(2024, 1, 8), 'demand': 6.0}]
        decision = evaluate_reorder(10, 0, points, 2)

        self.assertAlmostEqual(decision['lead_time_demand'], 12.0)
        self.assertTrue(decision['reorder'])
        self.assertAlmostEqual(decision['suggested_quantity'], 2.0)

    def test_zero_lead_time(self):
        """Test a zero lead time only compares current stock."""
        decision = evaluate_reorder(5, 10, make_points([2, 3]), 0)

        self.assertEqual(decision['lead_time_demand'], 0.0)
        self.assertTrue(decision['reorder'])
        self.assertAlmostEqual(decision['suggested_quantity'], 5.0)


class TestGenerateOrderNumber(unittest.TestCase):
    """Test cases for purchase order numbers."""

    def test_format(self):
        """Test the PO-YYYY-NNNN format."""
        order_number = generate_order_number(np.random.default_rng(0), year=2024)

        self.assertRegex(order_number, r'^PO-2024-\d{4}$')

    def test_defaults_to_current_year(self):
        order_number = generate_order_number()

        self.assertTrue(order_number.startswith(f"PO-{datetime.now().year}-"))
        self.assertIsNotNone(re.match(r'^PO-\d{4}-\d{4}$', order_number))

    def test_seeded_numbers_repeat(self):
        first = generate_order_number(np.random.default_rng(5), year=2024)
        second = generate_order_number(np.random.default_rng(5), year=2024)

        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
