"""SQLAlchemy models."""
from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from splitledger.database import Base


class ExpenseRecord(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Integer, nullable=False)
    description = Column(String(512), nullable=False, default="")
    paid_by = Column(String(255), nullable=False, index=True)
    share_type = Column(String(20), nullable=False, default="EQUAL")
    category = Column(String(100), nullable=False, default="other", index=True)
    date = Column(Date, nullable=False, index=True)
    recurring_rule_id = Column(Integer, ForeignKey("recurring_rules.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    participants = relationship(
        "ExpenseParticipant",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseParticipant.position",
    )
    shares = relationship(
        "ExpenseShare",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseShare.position",
    )


class ExpenseParticipant(Base):
    __tablename__ = "expense_participants"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False)
    person = Column(String(255), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    expense = relationship("ExpenseRecord", back_populates="participants")


class ExpenseShare(Base):
    __tablename__ = "expense_shares"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False)
    person = Column(String(255), nullable=False)
    # Decimal as text so percentages round-trip exactly.
    value = Column(String(40), nullable=False)
    position = Column(Integer, nullable=False)

    expense = relationship("ExpenseRecord", back_populates="shares")


class RecurringRuleRecord(Base):
    __tablename__ = "recurring_rules"

    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Integer, nullable=False)
    description = Column(String(512), nullable=False, default="")
    paid_by = Column(String(255), nullable=False)
    participants = Column(JSON, nullable=False, default=list)
    share_type = Column(String(20), nullable=False, default="EQUAL")
    custom_shares = Column(JSON, nullable=False, default=list)
    category = Column(String(100), nullable=False, default="other")
    frequency = Column(String(20), nullable=False, default="MONTHLY")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    last_materialized = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
