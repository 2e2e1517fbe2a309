"""Analytics: monthly, category, per-person, top-N and individual-vs-group views."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from splitledger.config import TOP_EXPENSES_DEFAULT_LIMIT
from splitledger.database import get_db
from splitledger.schemas import (
    CategorySummaryItem, Expense, IndividualVsGroup, MonthlySummary, SpendingPatterns,
)
from splitledger.services import analytics, store

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/monthly-summary", response_model=MonthlySummary)
def monthly_summary(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    today = date.today()
    year = today.year if year is None else year
    month = today.month if month is None else month
    return analytics.monthly_summary(store.load_expenses(db), year, month)


@router.get("/monthly-totals", response_model=dict[str, int])
def monthly_totals(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    return analytics.monthly_totals(store.load_expenses(db), start_date, end_date)


@router.get("/category-summary", response_model=list[CategorySummaryItem])
def category_summary(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    ranked: bool = Query(False),
    db: Session = Depends(get_db),
):
    return analytics.category_summary(store.load_expenses(db), start_date, end_date, ranked)


@router.get("/spending-patterns", response_model=SpendingPatterns)
def spending_patterns(
    person: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    return analytics.spending_patterns(store.load_expenses(db), person, start_date, end_date)


@router.get("/top-expenses", response_model=list[Expense])
def top_expenses(
    limit: int = Query(TOP_EXPENSES_DEFAULT_LIMIT),
    category: Optional[str] = Query(None),
    timeframe: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return analytics.top_expenses(store.load_expenses(db), limit, category, timeframe)


@router.get("/individual-vs-group", response_model=IndividualVsGroup)
def individual_vs_group(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    return analytics.individual_vs_group(store.load_expenses(db), start_date, end_date)
