from typing import List

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.exceptions import NotFoundError
from retailpulse.core.security import get_request_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.expense import ExpenseCreate, ExpenseRead, ExpenseUpdate
from retailpulse.services.expense_service import ExpenseService

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseRead])
async def list_expenses(ctx: RequestContext = Depends(get_request_context)):
    return await ExpenseService(ctx.db).list_expenses()


@router.post("", response_model=ExpenseRead, status_code=201)
async def create_expense(data: ExpenseCreate, ctx: RequestContext = Depends(get_request_context)):
    return await ExpenseService(ctx.db).create_expense(data, user_id=ctx.user_id)


@router.get("/{expense_id}", response_model=ExpenseRead)
async def get_expense(expense_id: int, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await ExpenseService(ctx.db).get_expense(expense_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")


@router.put("/{expense_id}", response_model=ExpenseRead)
async def update_expense(expense_id: int, data: ExpenseUpdate, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await ExpenseService(ctx.db).update_expense(expense_id, data, user_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")


@router.delete("/{expense_id}")
async def delete_expense(expense_id: int, ctx: RequestContext = Depends(get_request_context)):
    try:
        await ExpenseService(ctx.db).delete_expense(expense_id, user_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")
    return {"message": "Expense deleted"}
