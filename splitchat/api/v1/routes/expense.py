from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitchat.db.session import get_db
from splitchat.schemas.expense import ExpenseCreate, ExpenseOut
from splitchat.services.expense_services import create_expense, delete_expense, get_my_expenses, get_category_totals
from splitchat.core.dependencies import get_current_user

router = APIRouter()

@router.post("/", response_model=ExpenseOut, status_code=201)
async def add_expense(data: ExpenseCreate, db: AsyncSession = Depends(get_db), current_user: str = Depends(get_current_user)):
    return await create_expense(db, data, current_user)

@router.get("/my-expenses", response_model=list[ExpenseOut])
async def expenses_of_mine(
    db: AsyncSession = Depends(get_db),
    current_user: str = Depends(get_current_user),
):
    return await get_my_expenses(db, user_id=current_user)

@router.get("/categories")
async def category_totals(
    db: AsyncSession = Depends(get_db),
    current_user: str = Depends(get_current_user),
):
    return await get_category_totals(db, user_id=current_user)

@router.delete("/{expense_id}")
async def del_expense(expense_id: int, db: AsyncSession = Depends(get_db), current_user: str = Depends(get_current_user)):
    return await delete_expense(db, user_id=current_user, expense_id=expense_id)
