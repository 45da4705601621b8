from .date_utils import (
    js_day_of_week, add_days, forecast_dates, days_between,
    convert_to_datetime, start_of_day
)
from .math_utils import (
    round_half_up, truncate, calculate_moving_average,
    calculate_weighted_moving_average, add_noise, calculate_accuracy
)

__all__ = [
    'js_day_of_week',
    'add_days',
    'forecast_dates',
    'days_between',
    'convert_to_datetime',
    'start_of_day',
    'round_half_up',
    'truncate',
    'calculate_moving_average',
    'calculate_weighted_moving_average',
    'add_noise',
    'calculate_accuracy'
]
