# retailpulse/services/customer_service.py
"""
Customers and the loyalty programme.

Loyalty rules:
- 1 base point per 100 spent, multiplied by the tier multiplier
- tier from lifetime purchases: Gold >= 50000, Silver >= 20000, else Bronze
- 1 point redeems for 1 currency unit, capped at a tier-dependent share of the bill
"""

import logging
import math
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.enums import LoyaltyTier
from retailpulse.core.exceptions import CustomerNotFoundError, ValidationError
from retailpulse.core.utils import generate_customer_code, model_to_schema, models_to_schemas
from retailpulse.models.customer import Customer
from retailpulse.schemas.customer import CustomerRead, CustomerUpsert, LoyaltyUpdate, RedeemResult

logger = logging.getLogger(__name__)

POINTS_PER_AMOUNT = 100
SEARCH_LIMIT = 10

TIER_THRESHOLDS = (
    (LoyaltyTier.GOLD, 50000),
    (LoyaltyTier.SILVER, 20000),
)

TIER_MULTIPLIERS = {
    LoyaltyTier.BRONZE: 1.0,
    LoyaltyTier.SILVER: 1.5,
    LoyaltyTier.GOLD: 2.0,
}

# max share of a bill payable with points
TIER_REDEMPTION_LIMITS = {
    LoyaltyTier.BRONZE: 0.10,
    LoyaltyTier.SILVER: 0.15,
    LoyaltyTier.GOLD: 0.20,
}


def tier_for(total_purchases: float) -> LoyaltyTier:
    for tier, threshold in TIER_THRESHOLDS:
        if total_purchases >= threshold:
            return tier
    return LoyaltyTier.BRONZE


def points_for(amount: float, tier: LoyaltyTier) -> int:
    base = math.floor(max(amount, 0) / POINTS_PER_AMOUNT)
    return math.floor(base * TIER_MULTIPLIERS[tier])


def max_redeemable(available_points: int, bill_amount: float, tier: LoyaltyTier) -> int:
    cap = math.floor(bill_amount * TIER_REDEMPTION_LIMITS[tier])
    return max(0, min(available_points, cap))


class CustomerService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get(self, customer_id: int) -> Customer:
        customer = await self.db.get(Customer, customer_id)
        if not customer:
            raise CustomerNotFoundError(f"Customer with ID {customer_id} not found")
        return customer

    async def get_customer(self, customer_id: int) -> CustomerRead:
        return await model_to_schema(await self._get(customer_id), CustomerRead)

    async def list_customers(self) -> List[CustomerRead]:
        result = await self.db.execute(select(Customer).order_by(Customer.created_at.desc(), Customer.id.desc()))
        return await models_to_schemas(result.scalars().all(), CustomerRead)

    async def search(self, query: str) -> List[CustomerRead]:
        """Digits match the start of the mobile number, anything else matches inside the name"""
        query = (query or "").strip()
        if not query:
            return []

        stmt = select(Customer)
        if query.isdigit():
            stmt = stmt.where(Customer.mobile.startswith(query))
        else:
            stmt = stmt.where(Customer.name.ilike(f"%{query}%"))
        stmt = stmt.order_by(Customer.created_at.desc(), Customer.id.desc()).limit(SEARCH_LIMIT)

        result = await self.db.execute(stmt)
        return await models_to_schemas(result.scalars().all(), CustomerRead)

    async def upsert(self, data: CustomerUpsert) -> CustomerRead:
        """Find by mobile and refresh the name, or register a new Bronze customer"""
        mobile = data.mobile.strip()
        name = data.name.strip()
        if not mobile or not name:
            raise ValidationError("Mobile and name are required")

        customer = await self.db.scalar(select(Customer).where(Customer.mobile == mobile).limit(1))
        if customer:
            customer.name = name
        else:
            customer = Customer(
                name=name,
                mobile=mobile,
                customer_code=generate_customer_code(),
                tier=LoyaltyTier.BRONZE,
                credit_points=0,
                points_redeemed=0,
                total_purchases=0.0,
            )
            self.db.add(customer)
            logger.info(f"Registered customer {customer.customer_code}")

        await self.db.commit()
        await self.db.refresh(customer)
        return await model_to_schema(customer, CustomerRead)

    async def update_loyalty(self, customer_id: int, data: LoyaltyUpdate) -> CustomerRead:
        customer = await self._get(customer_id)
        for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(customer, key, value)
        await self.db.commit()
        await self.db.refresh(customer)
        return await model_to_schema(customer, CustomerRead)

    async def redeem(self, customer_id: int, points: int, bill_amount: float) -> RedeemResult:
        """
        Preview a redemption: how much discount ``points`` buys on a bill of ``bill_amount``.

        Nothing is written; the points are deducted when the sale is recorded.
        """
        customer = await self._get(customer_id)
        if points > customer.credit_points:
            raise ValidationError("Not enough credit points")
        usable = max_redeemable(points, bill_amount, customer.tier)
        return RedeemResult(discount=float(usable), points_used=usable)

    def apply_purchase(self, customer: Customer, amount: float, points_redeemed: int = 0,
                       points_earned: Optional[int] = None) -> int:
        """
        Credit a sale to a loaded customer. Flushing/committing is up to the caller.

        Points are earned at the tier held before the purchase. Returns the points earned.
        """
        earned = points_for(amount, customer.tier) if points_earned is None else points_earned
        customer.credit_points = customer.credit_points - points_redeemed + earned
        customer.points_redeemed = (customer.points_redeemed or 0) + points_redeemed
        customer.total_purchases = (customer.total_purchases or 0.0) + amount
        customer.tier = tier_for(customer.total_purchases)
        return earned

    def reverse_purchase(self, customer: Customer, amount: float, points_earned: int) -> int:
        """Undo a sale's effect on loyalty, never going below zero. Returns the points reversed."""
        customer.credit_points = max(0, customer.credit_points - points_earned)
        customer.total_purchases = max(0.0, (customer.total_purchases or 0.0) - amount)
        customer.tier = tier_for(customer.total_purchases)
        return points_earned
