from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from cleanadmin.db.session import Base


class PayrollStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class PayrollRecord(Base):
    __tablename__ = "payroll_records"
    __table_args__ = (
        UniqueConstraint("employee_id", "pay_date", name="uq_payroll_records_employee_week"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    pay_date = Column(Date, nullable=False, index=True)  # week start
    hours_worked = Column(Numeric(8, 2), nullable=False, default=0)
    # Snapshot of the employee's rate when the record was generated
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    total_pay = Column(Numeric(12, 2), nullable=False, default=0)
    # Derived from the ledger; see domains.payroll.ledger.recompute_status
    status = Column(String(20), nullable=False, default=PayrollStatus.PENDING.value)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship("Employee")
    transactions = relationship(
        "PayrollTransaction",
        back_populates="payroll_record",
        order_by="PayrollTransaction.id",
    )
