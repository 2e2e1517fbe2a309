"""Balances and settlements: who owes whom for a set of expenses."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from splitledger.database import get_db
from splitledger.schemas import Balance, MinimizeRequest, Settlement, SettlementSummary
from splitledger.services import store
from splitledger.services.balances import compute_balances
from splitledger.services.settlement_calculator import minimize_settlements

router = APIRouter(tags=["settlements"])


@router.get("/balances", response_model=dict[str, Balance])
def get_balances(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    expenses = store.load_expenses(db, start_date, end_date, category=category)
    return compute_balances(expenses)


@router.get("/settlements", response_model=SettlementSummary)
def get_settlements(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    expenses = store.load_expenses(db, start_date, end_date, category=category)
    balances = compute_balances(expenses)
    return SettlementSummary(
        balances=list(balances.values()),
        settlements=minimize_settlements(balances),
    )


@router.post("/settlements/minimize", response_model=list[Settlement])
def minimize(data: MinimizeRequest):
    return minimize_settlements(data.balances)
