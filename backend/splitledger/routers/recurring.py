"""Recurring expense rules and their materialization into expenses."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from splitledger.database import get_db
from splitledger.schemas import MaterializeResult, RecurringRule, RecurringRuleCreate
from splitledger.services import store

router = APIRouter(prefix="/recurring", tags=["recurring"])


@router.post("", response_model=RecurringRule)
def create_rule(data: RecurringRuleCreate, db: Session = Depends(get_db)):
    return store.save_rule(db, data)


@router.get("", response_model=list[RecurringRule])
def list_rules(db: Session = Depends(get_db)):
    return store.list_rules(db)


@router.post("/materialize", response_model=MaterializeResult)
def materialize_rules(until: Optional[date] = Query(None), db: Session = Depends(get_db)):
    until = until or date.today()
    return MaterializeResult(until=until, created=store.materialize_rules(db, until))
