from sqlalchemy import (
    Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint, UniqueConstraint,
    Table, JSON, func, text,
)
from sqlalchemy.orm import relationship
from ..core.db import Base
from ..domain.constants import REQUEST_STATUSES, REQUEST_STATUS_INITIAL, sql_in

# Solicitud <-> empleado, sin atributos propios
request_employee = Table(
    "RequestEmployee",
    Base.metadata,
    Column("RequestID",  Integer, ForeignKey("ServiceRequest.RequestID", ondelete="CASCADE"), primary_key=True),
    Column("EmployeeID", Integer, ForeignKey("Employee.EmployeeID",      ondelete="CASCADE"), primary_key=True),
)


class ServiceRequest(Base):
    __tablename__ = "ServiceRequest"

    RequestID     = Column(Integer, primary_key=True, autoincrement=True)
    Code          = Column(String(50),   nullable=False, unique=True)
    RequestDate   = Column(Date,         nullable=False)
    ScheduledDate = Column(Date,         nullable=False)
    Description   = Column(String(1000), nullable=False)
    MachineCount  = Column(Integer,      nullable=False, server_default=text("1"))
    Photos        = Column(JSON,         nullable=False, default=list)
    Status_s      = Column(String(20),   nullable=False, server_default=text(f"'{REQUEST_STATUS_INITIAL}'"))
    CompanyID     = Column(Integer, ForeignKey("Company.CompanyID", ondelete="CASCADE"), nullable=False)
    CreatedAt     = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    UpdatedAt     = Column(DateTime, nullable=False, server_default=func.current_timestamp(),
                           onupdate=func.current_timestamp())

    __table_args__ = (
        CheckConstraint(f"Status_s in ({sql_in(REQUEST_STATUSES)})", name="CK_Request_Status"),
    )

    company = relationship("Company", back_populates="requests")

    # La solicitud es dueña de sus líneas y asignaciones
    lines = relationship(
        "ReservationLine",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="ReservationLine.LineID",
        lazy="selectin",
    )
    employees = relationship(
        "Employee",
        secondary=request_employee,
        back_populates="requests",
        order_by="Employee.EmployeeID",
        lazy="selectin",
    )

    # Referenciados, no poseídos: al borrar la solicitud quedan con RequestID NULL
    maintenances = relationship("Maintenance", back_populates="request")


class ReservationLine(Base):
    """Pivote solicitud <-> máquina con cantidad y mantenimiento asociado."""
    __tablename__ = "ReservationLine"

    LineID        = Column(Integer, primary_key=True, autoincrement=True)
    RequestID     = Column(Integer, ForeignKey("ServiceRequest.RequestID", ondelete="CASCADE"), nullable=False)
    MachineID     = Column(Integer, ForeignKey("Machine.MachineID", ondelete="CASCADE"), nullable=False)
    Quantity      = Column(Integer, nullable=False, server_default=text("1"))
    MaintenanceID = Column(Integer, ForeignKey("Maintenance.MaintenanceID", ondelete="SET NULL"))

    __table_args__ = (
        CheckConstraint("Quantity >= 1", name="CK_ReservationLine_Quantity"),
        UniqueConstraint("RequestID", "MachineID", name="UQ_ReservationLine_Request_Machine"),
    )

    request     = relationship("ServiceRequest", back_populates="lines")
    machine     = relationship("Machine",        back_populates="reservation_lines")
    maintenance = relationship("Maintenance",    back_populates="reservation_lines")
