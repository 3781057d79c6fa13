from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, Text, UniqueConstraint
from sqlalchemy.sql import func

from ..core.database import Base

class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # One employee, one slot. Also the composite index for slot lookups.
        UniqueConstraint("date", "time", "employee", name="uq_appointments_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Booking details
    client = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False, default="")
    service = Column(String(255), nullable=False)

    # Slot
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)
    employee = Column(String(255), nullable=False)

    notes = Column(Text, nullable=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Appointment(id={self.id}, employee='{self.employee}', date='{self.date}', time='{self.time}')>"
