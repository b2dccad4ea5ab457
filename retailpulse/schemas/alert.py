from datetime import datetime
from typing import Optional

from retailpulse.core.enums import AlertType
from retailpulse.schemas.base import BaseSchema


class AlertProduct(BaseSchema):
    name: str
    sku: str
    category: str


class StockAlertRead(BaseSchema):
    id: int
    product_id: Optional[int] = None
    alert_type: AlertType
    stock_level: int
    threshold: int
    sms_sent: bool
    sms_sent_at: Optional[datetime] = None
    acknowledged: bool
    acknowledged_at: Optional[datetime] = None
    created_at: datetime
    product: Optional[AlertProduct] = None

    @classmethod
    def from_alert(cls, alert) -> "StockAlertRead":
        return cls(
            id=alert.id,
            product_id=alert.product_id,
            alert_type=alert.alert_type,
            stock_level=alert.stock,
            threshold=alert.threshold,
            sms_sent=alert.sms_sent,
            sms_sent_at=alert.sms_sent_at,
            acknowledged=alert.acknowledged,
            acknowledged_at=alert.acknowledged_at,
            created_at=alert.triggered_at,
            product=AlertProduct.model_validate(alert.product) if alert.product else None,
        )


class AlertCheckResult(BaseSchema):
    low_stock_alerts: int
    resolved_alerts: int
    expired_products: int
    expiring_soon_products: int
