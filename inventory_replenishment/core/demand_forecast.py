# inventory_replenishment/core/demand_forecast.py
"""
Demand forecasting engine.

Turns a product's daily demand history into a short-horizon daily forecast:
a weighted moving average gives the baseline level, a weekly seasonal profile
scales it per day, and each point gets a small random jitter.

Randomness comes from an injectable generator (numpy.random.Generator or
anything exposing random() -> float in [0, 1)) so results can be pinned.
"""
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from ..exceptions import ForecastError
from ..utils.date_utils import add_days, js_day_of_week
from ..utils.math_utils import (
    calculate_moving_average, calculate_weighted_moving_average,
    round_half_up, truncate
)

# Oldest to most recent; the most recent day carries 0.3
DEFAULT_WEIGHTS = (0.1, 0.1, 0.15, 0.15, 0.2, 0.3)
SERIES_WEIGHTS = (0.05, 0.05, 0.1, 0.1, 0.2, 0.2, 0.3)
SEASONAL_PERIOD = 7
DEFAULT_HORIZON = 7

JITTER_LOW = 0.9
JITTER_SPAN = 0.2

PLACEHOLDER_MIN = 5.0
PLACEHOLDER_SPAN = 5.0

ALIGN_POSITION = 'POSITION'
ALIGN_WEEKDAY = 'WEEKDAY'
SEASONAL_ALIGNMENTS = (ALIGN_POSITION, ALIGN_WEEKDAY)


@dataclass(frozen=True)
class HistoricalObservation:
    """One day of historical demand for a product."""
    date: Union[date, datetime]
    demand: float


@dataclass(frozen=True)
class ForecastPoint:
    """Predicted demand for one future day."""
    date: Union[date, datetime]
    demand: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'demand': self.demand}


def _field(observation, name: str):
    if isinstance(observation, Mapping):
        return observation[name]
    return getattr(observation, name)


def extract_demand_values(historical_demand: Sequence) -> List[float]:
    """Get the plain demand values, preserving order.

    Observations may be HistoricalObservation instances or mappings with
    'date' and 'demand' keys.
    """
    return [_field(obs, 'demand') for obs in historical_demand]


def calculate_seasonality(data: Sequence[float], period: int = SEASONAL_PERIOD) -> List[float]:
    """Calculate seasonal factors by position within the period.

    Value i of the history falls into bucket i % period. Each factor is the
    bucket average divided by the overall average.

    Args:
        data: Demand values ordered oldest first
        period: Season length (7 for weekly)

    Returns:
        List of period factors; all 1.0 when there are fewer than period
        values or the overall average is zero
    """
    values = np.asarray(data, dtype=float)
    if values.size < period:
        return [1.0] * period

    overall_average = values.mean()
    if overall_average == 0:
        return [1.0] * period

    positions = np.arange(values.size) % period
    return _bucket_factors(values, positions, period, overall_average)


def calculate_weekday_seasonality(
    historical_demand: Sequence,
    period: int = SEASONAL_PERIOD
) -> List[float]:
    """Calculate seasonal factors keyed by each observation's real weekday.

    Buckets use the Sunday=0 day of week of the observation date, so the
    profile lines up with the weekday lookup made at forecast time. Buckets
    without observations get a factor of 1.0.

    Args:
        historical_demand: Observations ordered oldest first
        period: Season length

    Returns:
        List of period factors
    """
    values = np.asarray(extract_demand_values(historical_demand), dtype=float)
    if values.size < period:
        return [1.0] * period

    overall_average = values.mean()
    if overall_average == 0:
        return [1.0] * period

    positions = np.array(
        [js_day_of_week(_field(obs, 'date')) % period for obs in historical_demand]
    )
    return _bucket_factors(values, positions, period, overall_average)


def _bucket_factors(values, positions, period, overall_average) -> List[float]:
    sums = np.bincount(positions, weights=values, minlength=period)
    counts = np.bincount(positions, minlength=period)

    factors = []
    for bucket in range(period):
        if counts[bucket] == 0:
            factors.append(1.0)
        else:
            factors.append(float(sums[bucket] / counts[bucket] / overall_average))

    return factors


def _horizon(days_to_forecast) -> int:
    if days_to_forecast <= 0:
        return 0
    return int(math.ceil(days_to_forecast))


def forecast_demand(
    historical_demand: Sequence,
    days_to_forecast: int = DEFAULT_HORIZON,
    rng=None,
    start_date: Optional[Union[date, datetime]] = None,
    weights: Sequence[float] = DEFAULT_WEIGHTS,
    period: int = SEASONAL_PERIOD,
    seasonal_alignment: str = ALIGN_POSITION
) -> List[ForecastPoint]:
    """Forecast daily demand for the next days_to_forecast days.

    The baseline is the weighted moving average of the history and is
    scaled by the seasonal factor for each forecast day's weekday
    (Sunday=0), then jittered by a factor in [0.9, 1.1), clamped at zero
    and rounded half up to one decimal.

    With the default POSITION alignment the seasonal buckets come from
    history positions (index % period) while the lookup uses the forecast
    day's weekday. The two only agree when the history starts on a Sunday.
    WEEKDAY alignment buckets the history by its real weekdays instead.

    Without history every day gets a placeholder in [5, 10).

    Args:
        historical_demand: Observations ordered oldest first
        days_to_forecast: Horizon in days; fractions round up, <= 0 gives []
        rng: Random generator; a fresh unseeded one is used if omitted
        start_date: First forecast day (defaults to now)
        weights: Weighted moving average weights, oldest first
        period: Seasonal period
        seasonal_alignment: 'POSITION' or 'WEEKDAY'

    Returns:
        List of ForecastPoint, one per day in order
    """
    if seasonal_alignment not in SEASONAL_ALIGNMENTS:
        raise ForecastError(
            f"Invalid seasonal alignment: {seasonal_alignment}",
            details={'seasonal_alignment': seasonal_alignment, 'allowed': list(SEASONAL_ALIGNMENTS)}
        )

    if rng is None:
        rng = np.random.default_rng()

    if start_date is None:
        start_date = datetime.now()

    horizon = _horizon(days_to_forecast)
    demand_values = extract_demand_values(historical_demand)

    if not demand_values:
        # Truncate so the placeholder stays below 10
        return [
            ForecastPoint(
                date=add_days(start_date, i),
                demand=truncate(PLACEHOLDER_MIN + rng.random() * PLACEHOLDER_SPAN)
            )
            for i in range(horizon)
        ]

    baseline = calculate_weighted_moving_average(demand_values, weights)

    if seasonal_alignment == ALIGN_WEEKDAY:
        seasonal_factors = calculate_weekday_seasonality(historical_demand, period)
    else:
        seasonal_factors = calculate_seasonality(demand_values, period)

    forecast = []
    for i in range(horizon):
        forecast_date = add_days(start_date, i)
        day_of_week = js_day_of_week(forecast_date)

        forecasted_demand = baseline * seasonal_factors[day_of_week % period]
        forecasted_demand *= JITTER_LOW + rng.random() * JITTER_SPAN
        forecasted_demand = round_half_up(max(0.0, forecasted_demand))

        forecast.append(ForecastPoint(date=forecast_date, demand=forecasted_demand))

    return forecast


def generate_forecast_series(
    historical_data: Sequence[float],
    days_to_forecast: int,
    use_moving_average: bool = True,
    seasonal_period: int = SEASONAL_PERIOD
) -> List[float]:
    """Generate a deterministic forecast as plain numbers.

    The seasonal position continues from the end of the history, so day i
    of the forecast uses factor (len(history) + i) % seasonal_period.

    Args:
        historical_data: Demand values ordered oldest first
        days_to_forecast: Number of values to produce
        use_moving_average: Simple moving average over up to 14 values if
            True, weighted moving average otherwise
        seasonal_period: Seasonal period

    Returns:
        List of forecast values (zeros without history)
    """
    horizon = _horizon(days_to_forecast)
    if len(historical_data) == 0:
        return [0.0] * horizon

    if use_moving_average:
        baseline = calculate_moving_average(historical_data, min(14, len(historical_data)))
    else:
        baseline = calculate_weighted_moving_average(historical_data, SERIES_WEIGHTS)

    seasonal_factors = calculate_seasonality(historical_data, seasonal_period)

    return [
        baseline * seasonal_factors[(len(historical_data) + i) % seasonal_period]
        for i in range(horizon)
    ]
