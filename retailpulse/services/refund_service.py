# retailpulse/services/refund_service.py
import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.enums import AuditAction
from retailpulse.core.exceptions import AlreadyRefundedError, RefundNotFoundError, TransactionNotFoundError
from retailpulse.core.utils import model_to_schema, models_to_schemas
from retailpulse.models.product import Product
from retailpulse.models.refund import Refund
from retailpulse.models.transaction import Transaction
from retailpulse.schemas.refund import RefundCreate, RefundRead
from retailpulse.services.audit_logger import AuditLogger
from retailpulse.services.customer_service import CustomerService

logger = logging.getLogger(__name__)


class RefundService:
    """
    Full refunds of a sale.

    A refund puts every line's quantity back on the shelf, takes back the
    loyalty points the sale earned and marks the transaction refunded. A sale
    can be refunded once.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_refund(self, data: RefundCreate, user_id: Optional[int] = None) -> RefundRead:
        transaction = await self.db.get(Transaction, data.transaction_id)
        if not transaction:
            raise TransactionNotFoundError(f"Transaction with ID {data.transaction_id} not found")
        if transaction.is_refunded:
            raise AlreadyRefundedError("Already refunded")

        try:
            for item in transaction.items:
                # products deleted since the sale are skipped
                await self.db.execute(
                    update(Product)
                    .where(Product.id == item.product_id)
                    .values(stock=Product.stock + item.quantity)
                    .execution_options(synchronize_session="fetch")
                )

            points_reversed = 0
            if transaction.customer is not None:
                points_reversed = CustomerService(self.db).reverse_purchase(
                    transaction.customer,
                    transaction.total_amount,
                    transaction.credit_points_earned or 0,
                )

            refund = Refund(
                transaction_id=transaction.id,
                refund_amount=data.refund_amount if data.refund_amount is not None else transaction.total_amount,
                refund_reason=data.reason,
                points_reversed=points_reversed,
                stock_reversed=True,
                processed_by=user_id,
            )
            self.db.add(refund)
            await self.db.flush()

            transaction.is_refunded = True
            transaction.refund_id = refund.id

            await AuditLogger(self.db).log(
                action=AuditAction.REFUND.value,
                user_id=user_id,
                entity_type="refund",
                entity_id=refund.id,
                old_values={"transaction_id": transaction.id},
                new_values={"refund_amount": refund.refund_amount, "points_reversed": points_reversed},
                notes=f"Refund processed for invoice {transaction.invoice_number}",
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(refund)
        logger.info(f"Refunded {transaction.invoice_number}: {refund.refund_amount}")
        return await model_to_schema(refund, RefundRead)

    async def list_refunds(self) -> List[RefundRead]:
        result = await self.db.execute(select(Refund).order_by(Refund.created_at.desc(), Refund.id.desc()))
        return await models_to_schemas(result.scalars().all(), RefundRead)

    async def get_for_transaction(self, transaction_id: int) -> RefundRead:
        refund = await self.db.scalar(select(Refund).where(Refund.transaction_id == transaction_id).limit(1))
        if not refund:
            raise RefundNotFoundError("Refund not found")
        return await model_to_schema(refund, RefundRead)
