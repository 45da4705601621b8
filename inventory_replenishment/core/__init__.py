from .demand_forecast import (
    HistoricalObservation, ForecastPoint, forecast_demand,
    calculate_seasonality, calculate_weekday_seasonality,
    extract_demand_values, generate_forecast_series
)
from .replenishment import (
    calculate_reorder_quantity, needs_reordering, is_low_stock,
    determine_order_quantity, calculate_order_value, evaluate_reorder,
    generate_order_number
)

__all__ = [
    'HistoricalObservation',
    'ForecastPoint',
    'forecast_demand',
    'calculate_seasonality',
    'calculate_weekday_seasonality',
    'extract_demand_values',
    'generate_forecast_series',
    'calculate_reorder_quantity',
    'needs_reordering',
    'is_low_stock',
    'determine_order_quantity',
    'calculate_order_value',
    'evaluate_reorder',
    'generate_order_number'
]
