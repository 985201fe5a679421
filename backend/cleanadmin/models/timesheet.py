from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from cleanadmin.db.session import Base

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Timesheet(Base):
    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("employee_id", "week_start_date", name="uq_timesheets_employee_week"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    week_start_date = Column(Date, nullable=False, index=True)  # always a Monday
    week_end_date = Column(Date, nullable=False)
    total_hours = Column(Numeric(8, 2), nullable=False, default=0)

    monday_hours = Column(Numeric(6, 2), nullable=False, default=0)
    tuesday_hours = Column(Numeric(6, 2), nullable=False, default=0)
    wednesday_hours = Column(Numeric(6, 2), nullable=False, default=0)
    thursday_hours = Column(Numeric(6, 2), nullable=False, default=0)
    friday_hours = Column(Numeric(6, 2), nullable=False, default=0)
    saturday_hours = Column(Numeric(6, 2), nullable=False, default=0)
    sunday_hours = Column(Numeric(6, 2), nullable=False, default=0)

    notes = Column(Text, nullable=True)
    synced_from_scheduler = Column(Boolean, nullable=False, default=False)
    synced_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship("Employee")
