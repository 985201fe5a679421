"""Payment ledger for payroll records.

A record's status is never stored on trust: it is recomputed from the sum of
its payment transactions after every ledger write or pay correction, inside
the same database transaction as that write.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from cleanadmin.core.errors import NotFound, ValidationError
from cleanadmin.core.logging import get_logger
from cleanadmin.core.numbers import ZERO, quantize, to_decimal
from cleanadmin.models import PayrollRecord, PayrollStatus, PayrollTransaction

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerSummary:
    total_paid: Decimal
    balance: Decimal
    overpaid: Decimal


def compute_status(total_pay, amounts: Iterable) -> PayrollStatus:
    paid = sum((to_decimal(amount) for amount in amounts), ZERO)
    if paid <= 0:
        return PayrollStatus.PENDING
    if paid >= to_decimal(total_pay):
        return PayrollStatus.PAID
    return PayrollStatus.PARTIAL


def summarize(total_pay, amounts: Iterable) -> LedgerSummary:
    paid = quantize(sum((to_decimal(amount) for amount in amounts), ZERO))
    total = quantize(total_pay)
    return LedgerSummary(
        total_paid=paid,
        balance=max(total - paid, ZERO),
        overpaid=max(paid - total, ZERO),
    )


def paid_sum(db: Session, record_id: int) -> Decimal:
    total = (
        db.query(func.coalesce(func.sum(PayrollTransaction.amount), 0))
        .filter(PayrollTransaction.payroll_record_id == record_id)
        .scalar()
    )
    return quantize(total)


def recompute_status(db: Session, record: PayrollRecord) -> PayrollStatus:
    """Re-derive ``record.status`` from the stored transactions (flushes pending writes)."""
    db.flush()
    paid = paid_sum(db, record.id)
    status = compute_status(record.total_pay, [paid])
    if paid > to_decimal(record.total_pay):
        logger.warning(
            "payroll_overpayment",
            payroll_record_id=record.id,
            total_pay=str(quantize(record.total_pay)),
            total_paid=str(paid),
        )
    if record.status != status.value:
        logger.info(
            "payroll_status_changed",
            payroll_record_id=record.id,
            previous=record.status,
            status=status.value,
        )
        record.status = status.value
    return status


def lock_record(db: Session, record_id: int) -> PayrollRecord:
    record = (
        db.query(PayrollRecord)
        .filter(PayrollRecord.id == record_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if not record:
        raise NotFound("Payroll record not found", {"payroll_record_id": record_id})
    return record


def record_payment(
    db: Session,
    record_id: int,
    amount,
    paid_at: datetime | None = None,
    method: str | None = None,
    memo: str | None = None,
) -> tuple[PayrollRecord, PayrollTransaction]:
    value = quantize(amount)
    if value <= 0:
        raise ValidationError("Payment amount must be greater than zero.", {"amount": str(amount)})

    record = lock_record(db, record_id)
    transaction = PayrollTransaction(
        payroll_record_id=record.id,
        amount=value,
        paid_at=paid_at or datetime.utcnow(),
        method=(method or "").strip() or None,
        memo=memo,
    )
    db.add(transaction)
    recompute_status(db, record)
    db.commit()
    db.refresh(record)
    db.refresh(transaction)

    logger.info(
        "payment_recorded",
        payroll_record_id=record.id,
        transaction_id=transaction.id,
        amount=str(value),
        status=record.status,
    )
    return record, transaction


def list_transactions(db: Session, record_id: int) -> list[PayrollTransaction]:
    if not db.query(PayrollRecord.id).filter(PayrollRecord.id == record_id).one_or_none():
        raise NotFound("Payroll record not found", {"payroll_record_id": record_id})
    return (
        db.query(PayrollTransaction)
        .filter(PayrollTransaction.payroll_record_id == record_id)
        .order_by(PayrollTransaction.paid_at.asc(), PayrollTransaction.id.asc())
        .all()
    )
