# inventory_replenishment/services/forecast_service.py
import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

import numpy as np
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_replenishment.config import config
from inventory_replenishment.models import Product, ForecastData
from inventory_replenishment.core.demand_forecast import ForecastPoint, forecast_demand
from inventory_replenishment.utils.math_utils import calculate_accuracy
from inventory_replenishment.utils.date_utils import add_days, forecast_dates, start_of_day
from inventory_replenishment.services.history_service import HistoryService
from inventory_replenishment.exceptions import ForecastError, NotFoundError
from inventory_replenishment.logging_setup import get_logger

# Set up logging
logger = get_logger(__name__)

class ForecastService:
    """Service for generating and storing product demand forecasts."""

    def __init__(self, session: Session, rng=None):
        """Initialize the forecast service.

        Args:
            session: Database session
            rng: Optional random generator for the forecast jitter; when
                omitted one is seeded from FORECAST.random_seed
        """
        self.session = session
        self.history_service = HistoryService(session)
        self._rng = rng
        self._forecast_settings = None

    @property
    def forecast_settings(self) -> Dict:
        """Get forecasting settings.

        Returns:
            Dictionary with forecasting settings
        """
        if not self._forecast_settings:
            self._forecast_settings = config.forecast_config
        return self._forecast_settings

    @property
    def rng(self):
        """Get the random generator used for forecasts."""
        if self._rng is None:
            self._rng = np.random.default_rng(self.forecast_settings['random_seed'])
        return self._rng

    @property
    def model_parameters(self) -> Dict[str, Any]:
        """Model metadata stored alongside each forecast point."""
        return {
            'method': self.forecast_settings['method_name'],
            'confidence': self.forecast_settings['confidence']
        }

    def get_product(self, product_id: int) -> Product:
        """Get a product by ID.

        Args:
            product_id: Product ID

        Returns:
            Product

        Raises:
            NotFoundError: If the product does not exist
        """
        product = self.session.get(Product, product_id)
        if not product:
            raise NotFoundError(resource='Product', resource_id=product_id)
        return product

    def get_product_forecast(
        self,
        product_id: int,
        start_date: Optional[Union[date, datetime]] = None,
        end_date: Optional[Union[date, datetime]] = None
    ) -> List[ForecastData]:
        """Get stored forecast rows for a product ordered by date.

        Args:
            product_id: Product ID
            start_date: Optional first day to include (whole day)
            end_date: Optional day to stop before (exclusive)

        Returns:
            List of ForecastData
        """
        query = self.session.query(ForecastData).filter(
            ForecastData.product_id == product_id
        )

        if start_date is not None:
            query = query.filter(ForecastData.date >= start_of_day(start_date))
        if end_date is not None:
            query = query.filter(ForecastData.date < start_of_day(end_date))

        return query.order_by(ForecastData.date.asc(), ForecastData.id.asc()).all()

    def _delete_rows_between(self, product_id: int, first_day: datetime, end_day: datetime) -> int:
        return self.session.query(ForecastData).filter(
            ForecastData.product_id == product_id,
            ForecastData.date >= first_day,
            ForecastData.date < end_day
        ).delete(synchronize_session=False)

    def generate_forecast(
        self,
        product_id: int,
        days_to_forecast: Optional[int] = None,
        start_date: Optional[Union[date, datetime]] = None
    ) -> List[ForecastPoint]:
        """Generate a new forecast for a product and store it.

        Stored rows on the days the new forecast covers are replaced, so each
        product has at most one row per day.

        Args:
            product_id: Product ID
            days_to_forecast: Horizon in days (defaults to FORECAST.horizon_days)
            start_date: First forecast day (defaults to now)

        Returns:
            List of ForecastPoint
        """
        self.get_product(product_id)

        if days_to_forecast is None:
            days_to_forecast = self.forecast_settings['horizon_days']

        history = self.history_service.get_historical_demand(product_id)
        if not history:
            logger.info(f"No sales history for product {product_id}, using placeholder forecast")

        settings = self.forecast_settings
        points = forecast_demand(
            history,
            days_to_forecast=days_to_forecast,
            rng=self.rng,
            start_date=start_date,
            weights=settings['weights'],
            period=settings['seasonal_period'],
            seasonal_alignment=settings['seasonal_alignment']
        )

        if not points:
            return points

        model_parameters = self.model_parameters

        try:
            replaced = self._delete_rows_between(
                product_id,
                start_of_day(points[0].date),
                add_days(start_of_day(points[-1].date), 1)
            )

            for point in points:
                self.session.add(ForecastData(
                    product_id=product_id,
                    date=point.date,
                    forecasted_demand=point.demand,
                    model_parameters=dict(model_parameters)
                ))

            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ForecastError(
                f"Failed to save forecast for product {product_id}: {str(e)}",
                product_id=product_id
            )

        logger.info(
            f"Generated {len(points)}-day forecast for product {product_id} "
            f"from {len(history)} observations (replaced {replaced} stored rows)"
        )

        return points

    def get_or_create_forecast(
        self,
        product_id: int,
        days_to_forecast: Optional[int] = None,
        start_date: Optional[Union[date, datetime]] = None
    ) -> List[Dict[str, Any]]:
        """Get the forecast for the next days_to_forecast days.

        Stored rows are reused only when every day of the window, starting at
        start_date, has one. Otherwise the window is generated again, which
        replaces the stored rows it overlaps.

        Args:
            product_id: Product ID
            days_to_forecast: Window length (defaults to FORECAST.horizon_days)
            start_date: First day of the window (defaults to now)

        Returns:
            List of dictionaries with 'date' and 'demand', one per day
        """
        self.get_product(product_id)

        if days_to_forecast is None:
            days_to_forecast = self.forecast_settings['horizon_days']
        if start_date is None:
            start_date = datetime.now()

        horizon = int(math.ceil(days_to_forecast)) if days_to_forecast > 0 else 0
        days = forecast_dates(start_of_day(start_date), horizon)
        if not days:
            return []

        stored = {}
        for row in self.get_product_forecast(product_id, days[0], add_days(days[-1], 1)):
            stored.setdefault(start_of_day(row.date), row)

        if all(day in stored for day in days):
            logger.debug(f"Reusing {len(days)} stored forecast rows for product {product_id}")
            return [
                {'date': stored[day].date, 'demand': stored[day].forecasted_demand}
                for day in days
            ]

        return [
            point.to_dict()
            for point in self.generate_forecast(product_id, days_to_forecast, start_date=start_date)
        ]

    def clear_product_forecast(self, product_id: int) -> int:
        """Delete stored forecast rows for a product.

        Args:
            product_id: Product ID

        Returns:
            Number of rows deleted
        """
        deleted = self.session.query(ForecastData).filter(
            ForecastData.product_id == product_id
        ).delete(synchronize_session=False)

        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ForecastError(
                f"Failed to clear forecast for product {product_id}: {str(e)}",
                product_id=product_id
            )

        return deleted

    def record_actual_demand(self, forecast_id: int, actual_demand: float) -> ForecastData:
        """Record the actual demand for a forecast row and score its accuracy.

        Args:
            forecast_id: ForecastData ID
            actual_demand: Observed demand for that day

        Returns:
            Updated ForecastData
        """
        row = self.session.get(ForecastData, forecast_id)
        if not row:
            raise NotFoundError(resource='Forecast', resource_id=forecast_id)

        row.actual_demand = actual_demand
        row.accuracy = calculate_accuracy(row.forecasted_demand, actual_demand)

        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ForecastError(
                f"Failed to record actual demand for forecast {forecast_id}: {str(e)}",
                product_id=row.product_id
            )

        return row
