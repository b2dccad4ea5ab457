"""
Purpose: Records a sale (bill) end to end.

Role: Prices the basket from the catalog, applies discounts and loyalty points,
takes the stock, credits the customer and writes the audit entry, all in one
database transaction. The low-stock alert check runs after the commit.

Totals follow calculate_totals(): the percentage discount and any flat discount
come off the subtotal, and GST is scaled by the same post-discount factor.
"""

import logging
from collections import OrderedDict
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select, update, exists, delete
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.enums import AuditAction
from retailpulse.core.exceptions import (
    CustomerNotFoundError,
    InsufficientStockError,
    NotificationError,
    ProductNotFoundError,
    TransactionNotFoundError,
    ValidationError,
)
from retailpulse.core.utils import generate_invoice_number, model_to_schema, models_to_schemas, utc_now
from retailpulse.models.category_gst import CategoryGST
from retailpulse.models.customer import Customer
from retailpulse.models.product import Product
from retailpulse.models.transaction import Transaction, TransactionItem
from retailpulse.schemas.transaction import BillTotals, TransactionCreate, TransactionRead
from retailpulse.services.alert_service import AlertService
from retailpulse.services.audit_logger import AuditLogger
from retailpulse.services.customer_service import CustomerService, max_redeemable
from retailpulse.services.sms_notifier import SmsNotifier

logger = logging.getLogger(__name__)

RECEIPT_PREVIEW_ITEMS = 4


def calculate_totals(lines: Sequence[Dict], discount_percent: float = 0.0, flat_discount: float = 0.0) -> BillTotals:
    """
    Bill totals from priced lines (each with ``subtotal`` and ``gst_amount``).

    All four values are rounded to 2 decimal places.
    """
    subtotal = sum(line["subtotal"] for line in lines)
    discount = subtotal * discount_percent / 100 + flat_discount
    factor = max(0.0, (subtotal - discount) / subtotal) if subtotal > 0 else 1.0
    gst_amount = sum((line.get("gst_amount") or 0.0) * factor for line in lines)
    total = max(0.0, subtotal - discount) + gst_amount

    return BillTotals(
        subtotal=round(subtotal, 2),
        gst_amount=round(gst_amount, 2),
        discount=round(discount, 2),
        total_amount=round(total, 2),
    )


class BillingService:
    def __init__(self, db: AsyncSession, notifier: Optional[SmsNotifier] = None):
        self.db = db
        self.notifier = notifier or SmsNotifier()
        self.customers = CustomerService(db)

    async def _invoice_exists(self, invoice_number: str) -> bool:
        return await self.db.scalar(select(exists().where(Transaction.invoice_number == invoice_number)))

    async def _next_invoice_number(self) -> str:
        now = utc_now()
        candidate = generate_invoice_number(now)
        attempt = 0
        while await self._invoice_exists(candidate):
            attempt += 1
            candidate = generate_invoice_number(now + timedelta(milliseconds=attempt))
        return candidate

    async def _price_lines(self, data: TransactionCreate) -> List[Dict]:
        product_ids = {item.product_id for item in data.items}
        result = await self.db.execute(select(Product).where(Product.id.in_(product_ids)))
        products = {p.id: p for p in result.scalars().all()}

        rates = dict((await self.db.execute(select(CategoryGST.name, CategoryGST.gst_rate))).all())

        lines = []
        for position, item in enumerate(data.items):
            product = products.get(item.product_id)
            if product is None:
                raise ProductNotFoundError(f"Product with ID {item.product_id} not found")
            if not product.is_active:
                raise ValidationError(f"Product '{product.name}' is inactive and cannot be sold")

            subtotal = product.selling_price * item.quantity
            gst_rate = rates.get(product.category, 0.0) or 0.0
            gst_amount = subtotal * gst_rate / 100
            lines.append({
                "position": position,
                "product_id": product.id,
                "product_name": product.name,
                "quantity": item.quantity,
                "unit_price": product.selling_price,
                "subtotal": round(subtotal, 2),
                "gst_rate": gst_rate,
                "gst_amount": round(gst_amount, 2),
                "total_with_gst": round(subtotal + gst_amount, 2),
            })
        return lines

    async def _take_stock(self, lines: Sequence[Dict]) -> None:
        wanted: Dict[int, int] = OrderedDict()
        for line in lines:
            wanted[line["product_id"]] = wanted.get(line["product_id"], 0) + line["quantity"]

        for product_id, quantity in wanted.items():
            result = await self.db.execute(
                update(Product)
                .where(Product.id == product_id, Product.stock >= quantity)
                .values(stock=Product.stock - quantity)
                .execution_options(synchronize_session="fetch")
            )
            if result.rowcount != 1:
                raise InsufficientStockError(f"Insufficient stock for product {product_id}")

    async def create_transaction(self, data: TransactionCreate, user_id: Optional[int] = None) -> TransactionRead:
        """
        Record a sale.

        Raises:
            ValidationError: no items, duplicate invoice number or too many points redeemed
            InsufficientStockError: any line asks for more than is in stock (nothing is written)
            CustomerNotFoundError: customer_id does not exist
        """
        if not data.items:
            raise ValidationError("No items provided")

        if data.invoice_number:
            if await self._invoice_exists(data.invoice_number):
                raise ValidationError(f"Invoice number '{data.invoice_number}' already exists")
            invoice_number = data.invoice_number
        else:
            invoice_number = await self._next_invoice_number()

        customer = None
        if data.customer_id is not None:
            customer = await self.db.get(Customer, data.customer_id)
            if customer is None:
                raise CustomerNotFoundError(f"Customer with ID {data.customer_id} not found")

        lines = await self._price_lines(data)
        totals = calculate_totals(lines, data.discount_percent, data.flat_discount)

        points_used = 0
        if data.redeem_points:
            if customer is None:
                raise ValidationError("Points can only be redeemed for a customer")
            if data.redeem_points > customer.credit_points:
                raise ValidationError("Not enough credit points")
            points_used = max_redeemable(data.redeem_points, totals.total_amount, customer.tier)
            totals = calculate_totals(lines, data.discount_percent, data.flat_discount + points_used)

        try:
            await self._take_stock(lines)

            transaction = Transaction(
                invoice_number=invoice_number,
                customer=customer,
                subtotal=totals.subtotal,
                gst_amount=totals.gst_amount,
                discount=totals.discount,
                total_amount=totals.total_amount,
                payment_method=data.payment_method,
                payment_status=data.payment_status or "completed",
                credit_points_earned=0,
                created_by=user_id,
                items=[TransactionItem(**line) for line in lines],
            )

            if customer is not None:
                transaction.credit_points_earned = self.customers.apply_purchase(
                    customer,
                    totals.total_amount,
                    points_redeemed=points_used,
                    points_earned=data.credit_points_earned,
                )

            self.db.add(transaction)
            await self.db.flush()

            await AuditLogger(self.db).log(
                action=AuditAction.BILLING.value,
                user_id=user_id,
                entity_type="transaction",
                entity_id=transaction.id,
                new_values={
                    "invoice_number": invoice_number,
                    "total_amount": totals.total_amount,
                    "payment_method": data.payment_method.value,
                    "items_count": len(lines),
                },
                notes=f"Billing completed for invoice {invoice_number}",
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Recorded sale {invoice_number}: {len(lines)} lines, total {totals.total_amount}")

        try:
            await AlertService(self.db, self.notifier).check_low_stock()
        except Exception as e:
            logger.error(f"Low stock check after sale {invoice_number} failed: {str(e)}")

        return await self.get_transaction(transaction.id)

    async def _get(self, transaction_id: int) -> Transaction:
        transaction = await self.db.get(Transaction, transaction_id)
        if not transaction:
            raise TransactionNotFoundError(f"Transaction with ID {transaction_id} not found")
        return transaction

    async def get_transaction(self, transaction_id: int) -> TransactionRead:
        return await model_to_schema(await self._get(transaction_id), TransactionRead)

    async def list_transactions(self) -> List[TransactionRead]:
        result = await self.db.execute(
            select(Transaction).order_by(Transaction.created_at.desc(), Transaction.id.desc())
        )
        return await models_to_schemas(result.scalars().all(), TransactionRead)

    def build_receipt(self, transaction: Transaction) -> str:
        items = transaction.items
        preview = ", ".join(f"{i.quantity}x {i.product_name}" for i in items[:RECEIPT_PREVIEW_ITEMS])
        more = f" +{len(items) - RECEIPT_PREVIEW_ITEMS} more" if len(items) > RECEIPT_PREVIEW_ITEMS else ""
        created_at = transaction.created_at or transaction.updated_at or utc_now()
        method = transaction.payment_method.value if transaction.payment_method else ""

        return (
            f"Invoice: {transaction.invoice_number}\n"
            f"Amount: Rs.{transaction.total_amount:.2f}\n"
            f"Date: {created_at.strftime('%d/%m/%Y, %H:%M')}\n"
            f"Items: {preview}{more}\n"
            f"Payment: {method.upper()}\n"
            f"Thank you for shopping!"
        )

    async def send_receipt(self, transaction_id: int) -> None:
        """
        Raises:
            ValidationError: the sale has no customer phone number
            NotificationError: the SMS could not be sent
        """
        transaction = await self._get(transaction_id)
        phone = transaction.customer.mobile if transaction.customer else None
        if not phone:
            raise ValidationError("Customer phone number not available")

        if not await self.notifier.send(phone, self.build_receipt(transaction)):
            raise NotificationError("Failed to send SMS")

    async def bulk_delete(self, ids: Sequence[int], user_id: Optional[int] = None) -> int:
        if not ids:
            raise ValidationError("Provide ids[] to delete")

        result = await self.db.execute(delete(Transaction).where(Transaction.id.in_(list(ids))))
        deleted = result.rowcount or 0

        await AuditLogger(self.db).log(
            action=AuditAction.DELETE.value,
            user_id=user_id,
            entity_type="transaction",
            entity_id="bulk",
            notes=f"Deleted {deleted} transactions by selection",
        )
        await self.db.commit()
        logger.info(f"Bulk deleted {deleted} transactions")
        return deleted
