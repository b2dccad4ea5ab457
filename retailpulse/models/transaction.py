# retailpulse/models/transaction.py

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from retailpulse.core.enums import PaymentMethod
from retailpulse.core.utils import utc_now
from retailpulse.database import Base


class Transaction(Base):
    """A completed sale (bill). Only the refund fields change after creation."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String(40), nullable=False, unique=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)

    subtotal = Column(Float, nullable=False)
    gst_amount = Column(Float, nullable=False, default=0.0)
    discount = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False)

    payment_method = Column(
        Enum(PaymentMethod, name="paymentmethod", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    payment_status = Column(String(30), nullable=False, default="completed")
    credit_points_earned = Column(Integer, nullable=False, default=0)

    is_refunded = Column(Boolean, nullable=False, default=False)
    refund_id = Column(Integer, nullable=True)

    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False)

    items = relationship(
        "TransactionItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionItem.position",
        lazy="selectin",
    )
    customer = relationship("Customer", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Transaction {self.invoice_number} total={self.total_amount}>"


class TransactionItem(Base):
    """One line of a bill, priced at the moment of sale."""

    __tablename__ = "transaction_items"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    # No foreign key: sales history outlives deleted products
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    subtotal = Column(Float, nullable=False)
    gst_rate = Column(Float, nullable=False, default=0.0)
    gst_amount = Column(Float, nullable=False, default=0.0)
    total_with_gst = Column(Float, nullable=False, default=0.0)

    transaction = relationship("Transaction", back_populates="items")
