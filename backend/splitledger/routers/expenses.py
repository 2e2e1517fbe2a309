"""Expenses: create, list, inspect, delete."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from splitledger.database import get_db
from splitledger.schemas import Expense, ExpenseCreate, SplitResponse
from splitledger.services import store
from splitledger.services.splits import compute_split

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.post("", response_model=Expense)
def create_expense(data: ExpenseCreate, db: Session = Depends(get_db)):
    return store.save_expense(db, data)


@router.get("", response_model=list[Expense])
def list_expenses(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    person: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return store.load_expenses(db, start_date, end_date, person, category)


@router.get("/people", response_model=list[str])
def list_people(db: Session = Depends(get_db)):
    return store.list_people(db)


def _get_or_404(db: Session, expense_id: int) -> Expense:
    expense = store.get_expense(db, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@router.get("/{expense_id}", response_model=Expense)
def get_expense(expense_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, expense_id)


@router.get("/{expense_id}/split", response_model=SplitResponse)
def get_split(expense_id: int, db: Session = Depends(get_db)):
    expense = _get_or_404(db, expense_id)
    return SplitResponse(expense_id=expense.id, shares=compute_split(expense))


@router.delete("/{expense_id}", status_code=204)
def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    if not store.delete_expense(db, expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
