from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from timesheet_compare.database import Base

class AttendanceDay(Base):
    __tablename__ = "attendance_days"
    
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    day = Column(DateTime, nullable=False, index=True)  # UTC midnight of the calendar date
    intervals = Column(JSON)  # legacy list of ISO instants, cleared on every write
    total_seconds = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=False)
    is_night_work = Column(Boolean, default=False)
    forgot_to_check_out = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    employee = relationship("Employee", backref="attendance_days")
    periods = relationship(
        "AttendancePeriod",
        back_populates="attendance_day",
        order_by="AttendancePeriod.position",
        cascade="all, delete-orphan",
    )
    
    __table_args__ = (
        UniqueConstraint('employee_id', 'day', name='uix_attendance_employee_day'),
    )

class AttendancePeriod(Base):
    __tablename__ = "attendance_periods"
    
    id = Column(Integer, primary_key=True, index=True)
    attendance_day_id = Column(Integer, ForeignKey("attendance_days.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, default=0, nullable=False)
    start_time = Column(DateTime)  # naive UTC
    end_time = Column(DateTime)  # naive UTC
    checkout_type = Column(String(20), default="manual")  # 'manual', 'auto'
    check_in_location = Column(JSON)  # {"lat", "long", "location_name"}
    check_out_location = Column(JSON)
    
    attendance_day = relationship("AttendanceDay", back_populates="periods")
