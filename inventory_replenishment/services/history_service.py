# inventory_replenishment/services/history_service.py
from datetime import datetime
from typing import List, Optional, Sequence

import pandas as pd
from sqlalchemy.orm import Session

from inventory_replenishment.models import Transaction, TransactionType
from inventory_replenishment.core.demand_forecast import HistoricalObservation
from inventory_replenishment.logging_setup import get_logger

logger = get_logger(__name__)

def transactions_to_observations(transactions: Sequence[Transaction]) -> List[HistoricalObservation]:
    """Map sale transactions to observations, oldest first.

    Non-sale transactions are ignored. Each sale becomes one observation.

    Args:
        transactions: Transactions in any order

    Returns:
        List of HistoricalObservation sorted ascending by date
    """
    sales = [t for t in transactions if t.transaction_type == TransactionType.SALE]
    sales.sort(key=lambda t: t.transaction_date)

    return [
        HistoricalObservation(date=t.transaction_date, demand=t.quantity)
        for t in sales
    ]

def aggregate_daily_demand(observations: Sequence[HistoricalObservation]) -> List[HistoricalObservation]:
    """Sum observations falling on the same calendar day.

    Args:
        observations: Observations in any order

    Returns:
        One observation per day with sales, dated at midnight, oldest first
    """
    if not observations:
        return []

    frame = pd.DataFrame({
        'date': pd.to_datetime([obs.date for obs in observations]).normalize(),
        'demand': [float(obs.demand) for obs in observations]
    })
    daily = frame.groupby('date', sort=True)['demand'].sum()

    return [
        HistoricalObservation(date=day.to_pydatetime(), demand=float(demand))
        for day, demand in daily.items()
    ]

class HistoryService:
    """Service for loading a product's demand history."""

    def __init__(self, session: Session):
        """Initialize the history service.

        Args:
            session: Database session
        """
        self.session = session

    def get_sale_transactions(
        self,
        product_id: int,
        since: Optional[datetime] = None
    ) -> List[Transaction]:
        """Get sale transactions for a product, oldest first.

        Args:
            product_id: Product ID
            since: Optional earliest transaction date

        Returns:
            List of Transaction
        """
        query = self.session.query(Transaction).filter(
            Transaction.product_id == product_id,
            Transaction.transaction_type == TransactionType.SALE
        )

        if since is not None:
            query = query.filter(Transaction.transaction_date >= since)

        return query.order_by(
            Transaction.transaction_date.asc(),
            Transaction.id.asc()
        ).all()

    def get_historical_demand(
        self,
        product_id: int,
        aggregate_daily: bool = False,
        since: Optional[datetime] = None
    ) -> List[HistoricalObservation]:
        """Get the demand history for a product.

        Args:
            product_id: Product ID
            aggregate_daily: Sum sales per calendar day instead of one
                observation per transaction
            since: Optional earliest transaction date

        Returns:
            List of HistoricalObservation, oldest first
        """
        transactions = self.get_sale_transactions(product_id, since=since)
        observations = transactions_to_observations(transactions)

        if aggregate_daily:
            observations = aggregate_daily_demand(observations)

        logger.debug(f"Loaded {len(observations)} demand observations for product {product_id}")

        return observations
