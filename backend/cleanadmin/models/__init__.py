from .employee import Employee
from .payroll_record import PayrollRecord, PayrollStatus
from .payroll_transaction import PayrollTransaction
from .timesheet import WEEKDAYS, Timesheet

__all__ = ["Employee", "Timesheet", "PayrollRecord", "PayrollStatus", "PayrollTransaction", "WEEKDAYS"]
