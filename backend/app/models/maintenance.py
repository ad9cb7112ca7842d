from sqlalchemy import Column, Integer, String, Date, DateTime, Text, DECIMAL, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from ..core.db import Base
from ..domain.constants import MIN_ESTIMATED_HOURS, MAX_ESTIMATED_HOURS

class Maintenance(Base):
    __tablename__ = "Maintenance"

    MaintenanceID   = Column(Integer, primary_key=True, autoincrement=True)
    Code            = Column(String(100),  nullable=False, unique=True)
    Name            = Column(String(255),  nullable=False)
    Description     = Column(String(1000), nullable=False)
    Cost            = Column(DECIMAL(12, 2), nullable=False)
    EstimatedHours  = Column(Integer,      nullable=False)
    ProcedureManual = Column(Text)
    DeliveryDate    = Column(Date,         nullable=False, index=True)
    MachineID       = Column(Integer, ForeignKey("Machine.MachineID", ondelete="CASCADE"), nullable=False)
    RequestID       = Column(Integer, ForeignKey("ServiceRequest.RequestID", ondelete="SET NULL"))
    CreatedAt       = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        CheckConstraint("Cost >= 0", name="CK_Maintenance_Cost_NonNegative"),
        CheckConstraint(
            f"EstimatedHours BETWEEN {MIN_ESTIMATED_HOURS} AND {MAX_ESTIMATED_HOURS}",
            name="CK_Maintenance_EstimatedHours",
        ),
    )

    machine  = relationship("Machine",        back_populates="maintenances")
    request  = relationship("ServiceRequest", back_populates="maintenances")
    payments = relationship("Payment",        back_populates="maintenance", cascade="all")

    # Líneas de reserva que apuntan a esta orden (MaintenanceID -> NULL al borrar)
    reservation_lines = relationship("ReservationLine", back_populates="maintenance")
