# inventory_replenishment/core/replenishment.py
from datetime import date
from typing import Dict, Optional, Sequence

import numpy as np

DEFAULT_ORDER_QUANTITY = 10.0

def calculate_reorder_quantity(
    daily_usage: float,
    lead_time: float,
    safety_stock: float = 0.0
) -> float:
    """Calculate the quantity needed to cover the lead time.

    Args:
        daily_usage: Expected units used per day
        lead_time: Lead time in days
        safety_stock: Extra units to hold

    Returns:
        Reorder quantity
    """
    return daily_usage * lead_time + safety_stock

def needs_reordering(current_stock: float, reorder_point: float) -> bool:
    """Check whether stock has reached the reorder point."""
    return current_stock <= reorder_point

def is_low_stock(current_stock: float, reorder_point: Optional[float]) -> bool:
    """Check whether stock is strictly below the reorder point.

    Products without a reorder point are never low stock.
    """
    if reorder_point is None:
        return False
    return current_stock < reorder_point

def determine_order_quantity(
    reorder_quantity: Optional[float],
    max_stock_level: Optional[float],
    current_stock: float,
    default: float = DEFAULT_ORDER_QUANTITY
) -> float:
    """Determine how many units to order for a low stock product.

    Uses the reorder quantity when set, otherwise tops the product up to its
    maximum stock level, otherwise falls back to the default. Missing, zero or
    negative values fall through to the next option.

    Args:
        reorder_quantity: Configured reorder quantity
        max_stock_level: Maximum stock level
        current_stock: Current stock
        default: Fallback quantity

    Returns:
        Order quantity
    """
    if reorder_quantity and reorder_quantity > 0:
        return reorder_quantity

    if max_stock_level is not None:
        top_up = max_stock_level - current_stock
        if top_up > 0:
            return top_up

    return default

def calculate_order_value(quantity: float, unit_price: float) -> float:
    """Calculate the value of an order line."""
    return quantity * unit_price

def evaluate_reorder(
    current_stock: float,
    reorder_point: float,
    forecast_points: Sequence,
    lead_time_days: int,
    safety_stock: float = 0.0
) -> Dict:
    """Decide whether to reorder based on forecast demand over the lead time.

    Args:
        current_stock: Current stock
        reorder_point: Reorder point
        forecast_points: Forecast points (objects or dicts with 'demand')
            ordered by date
        lead_time_days: Supplier lead time in days
        safety_stock: Safety stock

    Returns:
        Dictionary with the lead time demand, projected stock, whether to
        reorder and a suggested quantity
    """
    horizon = max(0, int(lead_time_days))
    demands = [
        point['demand'] if isinstance(point, dict) else point.demand
        for point in forecast_points[:horizon]
    ]
    lead_time_demand = float(np.sum(demands)) if demands else 0.0
    projected_stock = current_stock - lead_time_demand

    reorder = needs_reordering(projected_stock, reorder_point)

    # Brings projected stock back up to reorder point plus safety stock
    suggested_quantity = 0.0
    if reorder:
        daily_usage = lead_time_demand / horizon if horizon else 0.0
        suggested_quantity = max(
            0.0,
            calculate_reorder_quantity(daily_usage, horizon, safety_stock) + reorder_point - current_stock
        )

    return {
        'lead_time_days': horizon,
        'lead_time_demand': lead_time_demand,
        'projected_stock': projected_stock,
        'reorder': reorder,
        'suggested_quantity': suggested_quantity
    }

def generate_order_number(rng=None, year: Optional[int] = None) -> str:
    """Generate a purchase order number like PO-2024-0042.

    Args:
        rng: Random generator with an integers() method
        year: Year to embed (defaults to the current year)

    Returns:
        Order number
    """
    if rng is None:
        rng = np.random.default_rng()

    if year is None:
        year = date.today().year

    random_part = int(rng.integers(0, 10000))
    return f"PO-{year}-{random_part:04d}"
