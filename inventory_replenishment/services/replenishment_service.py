# inventory_replenishment/services/replenishment_service.py
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import numpy as np
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_replenishment.config import config
from inventory_replenishment.models import (
    Product, Supplier, PurchaseOrder, PurchaseOrderItem, OrderStatus
)
from inventory_replenishment.core.replenishment import (
    determine_order_quantity, calculate_order_value, evaluate_reorder,
    generate_order_number, needs_reordering
)
from inventory_replenishment.services.forecast_service import ForecastService
from inventory_replenishment.exceptions import OrderError, NotFoundError, ValidationError
from inventory_replenishment.logging_setup import get_logger

logger = get_logger(__name__)

AUTO_ORDER_NOTE = "Auto-generated based on low stock levels"
ORDER_NUMBER_ATTEMPTS = 20

class ReplenishmentService:
    """Service for low stock detection and automated purchase orders."""

    def __init__(self, session: Session, rng=None):
        """Initialize the replenishment service.

        Args:
            session: Database session
            rng: Optional random generator for order numbers
        """
        self.session = session
        self._rng = rng
        self._settings = None

    @property
    def settings(self) -> Dict:
        """Get replenishment settings."""
        if not self._settings:
            self._settings = config.replenishment_config
        return self._settings

    @property
    def rng(self):
        if self._rng is None:
            self._rng = np.random.default_rng()
        return self._rng

    def get_low_stock_products(self) -> List[Product]:
        """Get active products whose stock is below their reorder point.

        Returns:
            List of Product
        """
        return self.session.query(Product).filter(
            Product.is_active == True,
            Product.reorder_point.isnot(None),
            Product.current_stock < Product.reorder_point
        ).order_by(Product.id).all()

    def _next_order_number(self, supplier_id: int) -> str:
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            order_number = generate_order_number(self.rng)
            exists = self.session.query(PurchaseOrder.id).filter(
                PurchaseOrder.order_number == order_number
            ).first()
            if not exists:
                return order_number

        raise OrderError(
            f"Could not generate a unique order number after {ORDER_NUMBER_ATTEMPTS} attempts",
            supplier_id=supplier_id
        )

    def create_purchase_order(
        self,
        supplier: Supplier,
        products: List[Product],
        user_id: Optional[int] = None,
        order_date: Optional[datetime] = None
    ) -> PurchaseOrder:
        """Create a pending automated purchase order for a supplier.

        Args:
            supplier: Supplier to order from
            products: Products to include, one line each
            user_id: User the order is attributed to
            order_date: Order date (defaults to now)

        Returns:
            Created PurchaseOrder
        """
        if order_date is None:
            order_date = datetime.now()

        lead_time = supplier.lead_time
        if lead_time is None:
            lead_time = self.settings['default_lead_time']

        order = PurchaseOrder(
            order_number=self._next_order_number(supplier.id),
            supplier_id=supplier.id,
            order_date=order_date,
            expected_delivery_date=order_date + timedelta(days=lead_time),
            status=OrderStatus.PENDING,
            notes=AUTO_ORDER_NOTE,
            is_automated=True,
            user_id=user_id
        )

        total_value = 0.0
        for product in products:
            quantity = determine_order_quantity(
                product.reorder_quantity,
                product.max_stock_level,
                product.current_stock,
                default=self.settings['default_order_quantity']
            )
            total_price = calculate_order_value(quantity, product.price)
            total_value += total_price

            order.items.append(PurchaseOrderItem(
                product_id=product.id,
                quantity=quantity,
                unit_price=product.price,
                total_price=total_price
            ))

        order.total_value = total_value
        self.session.add(order)

        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise OrderError(
                f"Failed to create purchase order for supplier {supplier.id}: {str(e)}",
                supplier_id=supplier.id,
                details={'product_ids': [product.id for product in products]}
            )

        return order

    def auto_replenish(self, user_id: Optional[int] = None) -> Dict:
        """Create purchase orders for all low stock products, one per supplier.

        Products without a supplier, or whose supplier no longer exists, are
        skipped.

        Args:
            user_id: User the orders are attributed to

        Returns:
            Dictionary with a message, created order IDs and error count
        """
        low_stock_products = self.get_low_stock_products()

        results = {
            'message': "No products need replenishment",
            'low_stock_products': len(low_stock_products),
            'orders': [],
            'errors': 0
        }

        if not low_stock_products:
            return results

        supplier_groups = OrderedDict()
        for product in low_stock_products:
            if not product.supplier_id:
                logger.warning(f"Product {product.id} is low on stock but has no supplier")
                continue
            supplier_groups.setdefault(product.supplier_id, []).append(product)

        for supplier_id, products in supplier_groups.items():
            supplier = self.session.get(Supplier, supplier_id)
            if not supplier:
                logger.warning(f"Supplier {supplier_id} not found, skipping {len(products)} products")
                continue

            try:
                order = self.create_purchase_order(supplier, products, user_id=user_id)
                results['orders'].append({
                    'order_id': order.id,
                    'order_number': order.order_number,
                    'supplier_id': supplier.id,
                    'supplier_name': supplier.name,
                    'total_items': len(order.items),
                    'total_value': order.total_value
                })
            except OrderError as e:
                logger.error(f"Error generating order for supplier {supplier_id}: {str(e)}")
                results['errors'] += 1

        results['message'] = (
            f"Created {len(results['orders'])} purchase orders "
            f"for {len(low_stock_products)} products"
        )
        logger.info(results['message'])

        return results

    def evaluate_product_reorder(
        self,
        product_id: int,
        forecast_service: Optional[ForecastService] = None,
        safety_stock: float = 0.0
    ) -> Dict:
        """Compare a product's forecast demand over its lead time with its stock.

        Args:
            product_id: Product ID
            forecast_service: Forecast service to use (created if omitted)
            safety_stock: Safety stock

        Returns:
            Dictionary with the reorder decision
        """
        if safety_stock < 0:
            raise ValidationError(
                f"Safety stock must not be negative: {safety_stock}",
                field='safety_stock',
                value=safety_stock,
                details={'product_id': product_id}
            )

        product = self.session.get(Product, product_id)
        if not product:
            raise NotFoundError(resource='Product', resource_id=product_id)

        if forecast_service is None:
            forecast_service = ForecastService(self.session)

        lead_time = self.settings['default_lead_time']
        if product.supplier and product.supplier.lead_time is not None:
            lead_time = product.supplier.lead_time

        forecast = forecast_service.get_or_create_forecast(product_id, days_to_forecast=max(lead_time, 1))
        decision = evaluate_reorder(
            product.current_stock,
            product.reorder_point or 0.0,
            forecast,
            lead_time,
            safety_stock=safety_stock
        )
        decision['product_id'] = product_id

        return decision

    def get_inventory_summary(self) -> Dict:
        """Get stock and purchase order counts across all products.

        Returns:
            Dictionary with summary figures
        """
        products = self.session.query(Product).all()
        orders = self.session.query(PurchaseOrder).all()

        low_stock = 0
        out_of_stock = 0
        healthy = 0
        total_value = 0.0

        for product in products:
            reorder_point = product.reorder_point or 0.0
            if needs_reordering(product.current_stock, reorder_point):
                low_stock += 1
            else:
                healthy += 1
            if product.current_stock == 0:
                out_of_stock += 1
            total_value += product.current_stock * product.price

        return {
            'total_products': len(products),
            'low_stock_count': low_stock,
            'out_of_stock_count': out_of_stock,
            'healthy_stock_count': healthy,
            'total_inventory_value': total_value,
            'pending_orders_count': sum(1 for o in orders if o.status == OrderStatus.PENDING),
            'in_progress_orders_count': sum(1 for o in orders if o.status == OrderStatus.IN_PROGRESS),
            'automated_orders_count': sum(1 for o in orders if o.is_automated)
        }
