import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.enums import AuditAction
from retailpulse.core.exceptions import ExpenseNotFoundError
from retailpulse.core.utils import model_to_schema, models_to_schemas
from retailpulse.models.expense import Expense
from retailpulse.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseUpdate
from retailpulse.services.audit_logger import AuditLogger

logger = logging.getLogger(__name__)


class ExpenseService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditLogger(db)

    async def _get(self, expense_id: int) -> Expense:
        expense = await self.db.get(Expense, expense_id)
        if not expense:
            raise ExpenseNotFoundError(f"Expense with ID {expense_id} not found")
        return expense

    async def list_expenses(self) -> List[ExpenseRead]:
        result = await self.db.execute(
            select(Expense).order_by(Expense.expense_date.desc(), Expense.id.desc())
        )
        return await models_to_schemas(result.scalars().all(), ExpenseRead)

    async def get_expense(self, expense_id: int) -> ExpenseRead:
        return await model_to_schema(await self._get(expense_id), ExpenseRead)

    async def create_expense(self, data: ExpenseCreate, user_id: Optional[int] = None) -> ExpenseRead:
        expense = Expense(**data.model_dump(), created_by=user_id)
        self.db.add(expense)
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.CREATE.value,
            user_id=user_id,
            entity_type="expense",
            entity_id=expense.id,
            new_values={"category": expense.category, "amount": expense.amount},
            notes="Expense created",
        )
        await self.db.commit()
        await self.db.refresh(expense)
        return await model_to_schema(expense, ExpenseRead)

    async def update_expense(self, expense_id: int, data: ExpenseUpdate, user_id: Optional[int] = None) -> ExpenseRead:
        expense = await self._get(expense_id)
        changes = data.model_dump(exclude_unset=True)
        old_values = {key: getattr(expense, key) for key in changes}

        for key, value in changes.items():
            setattr(expense, key, value)

        await self.audit.log(
            action=AuditAction.UPDATE.value,
            user_id=user_id,
            entity_type="expense",
            entity_id=expense.id,
            old_values={k: str(v) if v is not None else None for k, v in old_values.items()},
            new_values={k: str(v) if v is not None else None for k, v in changes.items()},
            notes="Expense updated",
        )
        await self.db.commit()
        await self.db.refresh(expense)
        return await model_to_schema(expense, ExpenseRead)

    async def delete_expense(self, expense_id: int, user_id: Optional[int] = None) -> None:
        expense = await self._get(expense_id)
        await self.audit.log(
            action=AuditAction.DELETE.value,
            user_id=user_id,
            entity_type="expense",
            entity_id=expense.id,
            old_values={"category": expense.category, "amount": expense.amount},
            notes="Expense deleted",
        )
        await self.db.delete(expense)
        await self.db.commit()
        logger.info(f"Deleted expense {expense_id}")
