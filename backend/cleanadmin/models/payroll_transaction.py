from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from cleanadmin.db.session import Base


class PayrollTransaction(Base):
    """Append-only payment against a payroll record."""

    __tablename__ = "payroll_transactions"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_payroll_transactions_amount_positive"),)

    id = Column(Integer, primary_key=True, index=True)
    payroll_record_id = Column(
        Integer, ForeignKey("payroll_records.id"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 2), nullable=False)
    paid_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    method = Column(String(50), nullable=True)
    memo = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    payroll_record = relationship("PayrollRecord", back_populates="transactions")
