from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, func
from timesheet_compare.database import Base

class Employee(Base):
    __tablename__ = "employees"
    
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String(50), unique=True, nullable=False, index=True)  # 外部員工編號
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), default="")
    email = Column(String(120))
    job_title = Column(String(100))
    date_of_joining = Column(Date)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()
