from .history_service import HistoryService
from .forecast_service import ForecastService
from .replenishment_service import ReplenishmentService

__all__ = [
    'HistoryService',
    'ForecastService',
    'ReplenishmentService'
]
