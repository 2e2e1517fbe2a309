"""Expense store: persists expenses and recurring rules, hands out immutable snapshots."""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from splitledger.models import ExpenseParticipant, ExpenseRecord, ExpenseShare, RecurringRuleRecord
from splitledger.schemas import (
    Expense, ExpenseCreate, RecurringRule, RecurringRuleCreate, ShareEntry, ShareType,
)
from splitledger.services.dates import check_range
from splitledger.services.ordering import sorted_people
from splitledger.services.recurring import materialize
from splitledger.services.splits import compute_split

logger = logging.getLogger(__name__)


def to_expense(record: ExpenseRecord) -> Expense:
    return Expense(
        id=record.id,
        amount=record.amount,
        description=record.description or "",
        paid_by=record.paid_by,
        participants=tuple(p.person for p in record.participants),
        share_type=ShareType(record.share_type),
        custom_shares=tuple(ShareEntry(person=s.person, value=Decimal(s.value)) for s in record.shares),
        category=record.category,
        date=record.date,
    )


def to_rule(record: RecurringRuleRecord) -> RecurringRule:
    return RecurringRule(
        id=record.id,
        amount=record.amount,
        description=record.description or "",
        paid_by=record.paid_by,
        participants=tuple(record.participants),
        share_type=ShareType(record.share_type),
        custom_shares=tuple(ShareEntry(person=p, value=Decimal(v)) for p, v in record.custom_shares),
        category=record.category,
        frequency=record.frequency,
        start_date=record.start_date,
        end_date=record.end_date,
        last_materialized=record.last_materialized,
    )


def load_expenses(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    person: Optional[str] = None,
    category: Optional[str] = None,
) -> list[Expense]:
    """Snapshot of matching expenses ordered by date then id. `person` matches payer or participant."""
    check_range(start_date, end_date)
    q = db.query(ExpenseRecord).options(
        selectinload(ExpenseRecord.participants), selectinload(ExpenseRecord.shares)
    )
    if start_date:
        q = q.filter(ExpenseRecord.date >= start_date)
    if end_date:
        q = q.filter(ExpenseRecord.date <= end_date)
    if category:
        q = q.filter(ExpenseRecord.category == category)
    if person:
        q = q.filter(or_(
            ExpenseRecord.paid_by == person,
            ExpenseRecord.participants.any(ExpenseParticipant.person == person),
        ))
    records = q.order_by(ExpenseRecord.date, ExpenseRecord.id).all()
    return [to_expense(r) for r in records]


def get_expense(db: Session, expense_id: int) -> Optional[Expense]:
    record = db.query(ExpenseRecord).filter(ExpenseRecord.id == expense_id).first()
    return to_expense(record) if record else None


def list_people(db: Session) -> list[str]:
    payers = {row[0] for row in db.query(ExpenseRecord.paid_by).distinct()}
    participants = {row[0] for row in db.query(ExpenseParticipant.person).distinct()}
    return sorted_people(payers | participants)


def _add_expense(db: Session, data: ExpenseCreate, rule_id: Optional[int] = None) -> ExpenseRecord:
    day = data.date or date.today()
    # Reject splits that do not reconcile before anything is written.
    compute_split(Expense(**data.model_dump(exclude={"date"}), id=0, date=day))

    record = ExpenseRecord(
        amount=data.amount,
        description=data.description,
        paid_by=data.paid_by,
        share_type=data.share_type.value,
        category=data.category,
        date=day,
        recurring_rule_id=rule_id,
    )
    record.participants = [
        ExpenseParticipant(person=person, position=i) for i, person in enumerate(data.participants)
    ]
    if data.share_type != ShareType.EQUAL:
        record.shares = [
            ExpenseShare(person=s.person, value=str(s.value), position=i)
            for i, s in enumerate(data.custom_shares)
        ]
    db.add(record)
    return record


def save_expense(db: Session, data: ExpenseCreate) -> Expense:
    record = _add_expense(db, data)
    db.commit()
    db.refresh(record)
    logger.info("Recorded expense %s: %d paid by %s", record.id, record.amount, record.paid_by)
    return to_expense(record)


def delete_expense(db: Session, expense_id: int) -> bool:
    record = db.query(ExpenseRecord).filter(ExpenseRecord.id == expense_id).first()
    if not record:
        return False
    db.delete(record)
    db.commit()
    return True


def save_rule(db: Session, data: RecurringRuleCreate) -> RecurringRule:
    fields = data.model_dump(include=set(ExpenseCreate.model_fields) - {"date"})
    compute_split(Expense(**fields, id=0, date=data.start_date))

    record = RecurringRuleRecord(
        amount=data.amount,
        description=data.description,
        paid_by=data.paid_by,
        participants=list(data.participants),
        share_type=data.share_type.value,
        custom_shares=[[s.person, str(s.value)] for s in data.custom_shares],
        category=data.category,
        frequency=data.frequency.value,
        start_date=data.start_date,
        end_date=data.end_date,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return to_rule(record)


def list_rules(db: Session) -> list[RecurringRule]:
    return [to_rule(r) for r in db.query(RecurringRuleRecord).order_by(RecurringRuleRecord.id).all()]


def materialize_rules(db: Session, until: date) -> list[Expense]:
    """
    Creates every pending occurrence up to `until`. Each rule remembers the last
    date it produced, so calling this again never duplicates an expense.
    A rule whose split does not reconcile fails the whole call and nothing is written.
    """
    created: list[ExpenseRecord] = []
    try:
        for record in db.query(RecurringRuleRecord).order_by(RecurringRuleRecord.id).all():
            pending = materialize(to_rule(record), until, after=record.last_materialized)
            for data in pending:
                created.append(_add_expense(db, data, rule_id=record.id))
            if pending:
                record.last_materialized = pending[-1].date
        db.commit()
    except Exception:
        db.rollback()
        raise

    for record in created:
        db.refresh(record)
    logger.info("Materialized %d recurring expenses up to %s", len(created), until)
    return sorted((to_expense(r) for r in created), key=lambda e: (e.date, e.id))
