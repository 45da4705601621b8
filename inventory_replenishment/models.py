# inventory_replenishment/models.py
from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, ForeignKey, Text, Enum, JSON, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import enum

Base = declarative_base()

class TransactionType(enum.Enum):
    """Inventory transaction types.

    Only SALE transactions feed the demand history.
    """
    RECEIVE = 'receive'
    SALE = 'sale'
    ADJUSTMENT = 'adjustment'
    COUNT = 'count'

class OrderStatus(enum.Enum):
    DRAFT = 'draft'
    PENDING = 'pending'
    APPROVED = 'approved'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

class Supplier(Base):
    __tablename__ = 'suppliers'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    contact_name = Column(String(100))
    contact_email = Column(String(100))
    lead_time = Column(Integer, default=1)  # days

    products = relationship("Product", back_populates="supplier")
    purchase_orders = relationship("PurchaseOrder", back_populates="supplier")

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}', lead_time={self.lead_time})>"

class Product(Base):
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    sku = Column(String(50), unique=True)
    supplier_id = Column(Integer, ForeignKey('suppliers.id'))
    unit = Column(String(20), default='each')
    price = Column(Float, nullable=False)

    # Stock levels
    current_stock = Column(Float, nullable=False, default=0.0)
    max_stock_level = Column(Float)
    reorder_point = Column(Float, default=0.0)
    reorder_quantity = Column(Float, default=0.0)

    is_active = Column(Boolean, default=True)

    supplier = relationship("Supplier", back_populates="products")
    transactions = relationship("Transaction", back_populates="product")
    forecasts = relationship("ForecastData", back_populates="product")

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', current_stock={self.current_stock})>"

class Transaction(Base):
    __tablename__ = 'transactions'

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey('products.id'))
    quantity = Column(Float, nullable=False)
    transaction_type = Column(Enum(TransactionType), nullable=False)
    transaction_date = Column(DateTime, default=func.now())
    notes = Column(Text)

    product = relationship("Product", back_populates="transactions")

    __table_args__ = (
        Index('idx_transaction_product_date', 'product_id', 'transaction_date'),
    )

class PurchaseOrder(Base):
    __tablename__ = 'purchase_orders'

    id = Column(Integer, primary_key=True)
    order_number = Column(String(20), nullable=False, unique=True)
    supplier_id = Column(Integer, ForeignKey('suppliers.id'))
    order_date = Column(DateTime, default=func.now())
    expected_delivery_date = Column(DateTime)
    status = Column(Enum(OrderStatus), default=OrderStatus.DRAFT)
    total_value = Column(Float, default=0.0)
    notes = Column(Text)
    is_automated = Column(Boolean, default=False)
    user_id = Column(Integer)

    supplier = relationship("Supplier", back_populates="purchase_orders")
    items = relationship("PurchaseOrderItem", back_populates="purchase_order", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<PurchaseOrder(id={self.id}, order_number='{self.order_number}', status={self.status})>"

class PurchaseOrderItem(Base):
    __tablename__ = 'purchase_order_items'

    id = Column(Integer, primary_key=True)
    purchase_order_id = Column(Integer, ForeignKey('purchase_orders.id'))
    product_id = Column(Integer, ForeignKey('products.id'))
    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)

    purchase_order = relationship("PurchaseOrder", back_populates="items")
    product = relationship("Product")

class ForecastData(Base):
    __tablename__ = 'forecast_data'

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey('products.id'))
    date = Column(DateTime, nullable=False)
    forecasted_demand = Column(Float, nullable=False)
    actual_demand = Column(Float)
    accuracy = Column(Float)
    model_parameters = Column(JSON)

    product = relationship("Product", back_populates="forecasts")

    __table_args__ = (
        Index('idx_forecast_product_date', 'product_id', 'date'),
    )

    def __repr__(self):
        return f"<ForecastData(product_id={self.product_id}, date={self.date}, forecasted_demand={self.forecasted_demand})>"
