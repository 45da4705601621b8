from .config import config
from .db import db, session_scope
from .logging_setup import logger, get_logger
from .exceptions import ReplenishmentError, ForecastError, OrderError, NotFoundError
from .core.demand_forecast import HistoricalObservation, ForecastPoint, forecast_demand

__all__ = [
    'config',
    'db',
    'session_scope',
    'logger',
    'get_logger',
    'ReplenishmentError',
    'ForecastError',
    'OrderError',
    'NotFoundError',
    'HistoricalObservation',
    'ForecastPoint',
    'forecast_demand'
]
