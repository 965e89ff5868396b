from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, JSON, UniqueConstraint, func
from timesheet_compare.database import Base

class TimesheetImport(Base):
    __tablename__ = "timesheet_imports"
    
    id = Column(Integer, primary_key=True, index=True)
    import_key = Column(String(50), unique=True, nullable=False, default="current")
    date_range_start = Column(String(10))  # DD/MM/YYYY
    date_range_end = Column(String(10))
    employees = Column(JSON, nullable=False, default=list)
    employee_list = Column(JSON, nullable=False, default=list)
    updated_employees = Column(JSON, nullable=False, default=list)
    is_loaded = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class SuspectDay(Base):
    __tablename__ = "suspect_days"
    
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String(50), nullable=False, index=True)  # 外部員工編號
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    __table_args__ = (
        UniqueConstraint('employee_id', 'date', name='uix_suspect_employee_date'),
    )
