"""
Purpose: Stock and expiry alerts.

check_low_stock: every active product at or below LOW_STOCK_ALERT_LIMIT gets one
open alert (and one SMS to the shop's alert phone). Once the product is restocked
above the limit its open alerts are marked resolved, so the next dip alerts again.

check_expired_products: products past their expiry date are deactivated; those
and the ones expiring within EXPIRY_WARNING_DAYS are reported. Expiry alerts carry
a threshold of 0, and a product alerted in the last 24 hours is not alerted again.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select, exists, update
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.exceptions import AlertNotFoundError
from retailpulse.core.utils import business_now, utc_now
from retailpulse.models.product import Product
from retailpulse.models.stock_alert import StockAlert
from retailpulse.schemas.alert import AlertCheckResult, StockAlertRead
from retailpulse.services.sms_notifier import SmsNotifier

logger = logging.getLogger(__name__)

LOW_STOCK_ALERT_LIMIT = 5
EXPIRY_WARNING_DAYS = 3
EXPIRY_ALERT_COOLDOWN = timedelta(hours=24)


class AlertService:
    def __init__(self, db: AsyncSession, notifier: Optional[SmsNotifier] = None):
        self.db = db
        self.notifier = notifier or SmsNotifier()

    async def _has_open_stock_alert(self, product_id: int) -> bool:
        return await self.db.scalar(select(exists().where(
            StockAlert.product_id == product_id,
            StockAlert.resolved.is_(False),
            StockAlert.threshold != 0,
        )))

    async def _alerted_recently(self, product_id: int) -> bool:
        since = utc_now() - EXPIRY_ALERT_COOLDOWN
        return await self.db.scalar(select(exists().where(
            StockAlert.product_id == product_id,
            StockAlert.triggered_at >= since,
        )))

    async def check_low_stock(self) -> Tuple[int, int]:
        """Returns (alerts created, alerts resolved)"""
        resolved = await self.db.execute(
            update(StockAlert)
            .where(
                StockAlert.resolved.is_(False),
                StockAlert.threshold != 0,
                StockAlert.product_id.in_(
                    select(Product.id).where(Product.stock > LOW_STOCK_ALERT_LIMIT)
                ),
            )
            .values(resolved=True)
            .execution_options(synchronize_session="fetch")
        )
        resolved_count = resolved.rowcount or 0

        result = await self.db.execute(
            select(Product)
            .where(Product.stock <= LOW_STOCK_ALERT_LIMIT, Product.is_active.is_(True))
            .order_by(Product.id)
        )

        created = 0
        for product in result.scalars().all():
            if await self._has_open_stock_alert(product.id):
                continue

            level = "Out of stock" if product.stock <= 0 else "Low stock"
            message = f"{level}: {product.name} (SKU {product.sku or 'N/A'}) remaining {product.stock}"
            sms_sent = await self.notifier.send_alert(message)

            self.db.add(StockAlert(
                product=product,
                stock=product.stock,
                threshold=LOW_STOCK_ALERT_LIMIT,
                sms_sent=sms_sent,
                sms_sent_at=utc_now() if sms_sent else None,
                triggered_at=utc_now(),
            ))
            created += 1

        await self.db.commit()
        if created or resolved_count:
            logger.info(f"Low stock check: {created} new alerts, {resolved_count} resolved")
        return created, resolved_count

    async def _record_expiry_alerts(self, products: Sequence[Product], sms_sent: bool) -> None:
        for product in products:
            if await self._alerted_recently(product.id):
                continue
            self.db.add(StockAlert(
                product=product,
                stock=product.stock or 0,
                threshold=0,
                sms_sent=sms_sent,
                sms_sent_at=utc_now() if sms_sent else None,
                triggered_at=utc_now(),
            ))

    async def check_expired_products(self, today: Optional[date] = None) -> Tuple[int, int]:
        """Returns (products deactivated, products expiring soon)"""
        today = today or business_now().date()
        soon = today + timedelta(days=EXPIRY_WARNING_DAYS)

        expired = (await self.db.execute(
            select(Product)
            .where(Product.expiry_date <= today, Product.is_active.is_(True))
            .order_by(Product.id)
        )).scalars().all()
        expiring = (await self.db.execute(
            select(Product)
            .where(Product.expiry_date > today, Product.expiry_date <= soon, Product.is_active.is_(True))
            .order_by(Product.expiry_date, Product.id)
        )).scalars().all()

        if expired:
            for product in expired:
                product.is_active = False
            names = ", ".join(p.name for p in expired)
            sent = await self.notifier.send_alert(f"Expired products deactivated: {names}")
            await self._record_expiry_alerts(expired, sent)

        if expiring:
            names = ", ".join(f"{p.name} ({p.expiry_date.isoformat()})" for p in expiring)
            sent = await self.notifier.send_alert(f"Products expiring soon: {names}")
            await self._record_expiry_alerts(expiring, sent)

        await self.db.commit()
        logger.info(f"Expiry check: {len(expired)} deactivated, {len(expiring)} expiring soon")
        return len(expired), len(expiring)

    async def run_checks(self) -> AlertCheckResult:
        expired, expiring = await self.check_expired_products()
        created, resolved = await self.check_low_stock()
        return AlertCheckResult(
            low_stock_alerts=created,
            resolved_alerts=resolved,
            expired_products=expired,
            expiring_soon_products=expiring,
        )

    async def list_alerts(self) -> List[StockAlertRead]:
        result = await self.db.execute(
            select(StockAlert).order_by(StockAlert.triggered_at.desc(), StockAlert.id.desc())
        )
        return [StockAlertRead.from_alert(alert) for alert in result.scalars().all()]

    async def acknowledge(self, alert_id: int, user_id: Optional[int] = None) -> StockAlertRead:
        alert = await self.db.get(StockAlert, alert_id)
        if not alert:
            raise AlertNotFoundError("Alert not found")

        alert.acknowledged = True
        alert.acknowledged_at = utc_now()
        alert.acknowledged_by = user_id
        await self.db.commit()
        return StockAlertRead.from_alert(alert)
