from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, func, text
from sqlalchemy.orm import relationship
from ..core.db import Base
from ..domain.constants import CATEGORY_KINDS, MACHINE_STATUSES, MACHINE_STATUS_INITIAL, sql_in

class MachineCategory(Base):
    __tablename__ = "MachineCategory"

    CategoryID  = Column(Integer, primary_key=True, autoincrement=True)
    Kind        = Column(String(20),  nullable=False)   # 'ligera' | 'pesada'
    Description = Column(String(500), nullable=False)

    __table_args__ = (
        CheckConstraint(f"Kind in ({sql_in(CATEGORY_KINDS)})", name="CK_MachineCategory_Kind"),
    )

    machines = relationship("Machine", back_populates="category", cascade="all")


class Machine(Base):
    __tablename__ = "Machine"

    MachineID   = Column(Integer, primary_key=True, autoincrement=True)
    MachineType = Column(String(255), nullable=False, index=True)   # ej: "Retroexcavadora"
    Name        = Column(String(200), nullable=False)
    CategoryID  = Column(Integer, ForeignKey("MachineCategory.CategoryID", ondelete="CASCADE"), nullable=False)
    CompanyID   = Column(Integer, ForeignKey("Company.CompanyID", ondelete="SET NULL"))
    Status_s    = Column(String(20), nullable=False, server_default=text(f"'{MACHINE_STATUS_INITIAL}'"))
    CreatedAt   = Column(DateTime,   nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        CheckConstraint(f"Status_s in ({sql_in(MACHINE_STATUSES)})", name="CK_Machine_Status"),
    )

    category = relationship("MachineCategory", back_populates="machines")
    company  = relationship("Company",         back_populates="machines")

    # 1 máquina -> N líneas de reserva / N mantenimientos
    reservation_lines = relationship("ReservationLine", back_populates="machine", cascade="all")
    maintenances      = relationship("Maintenance",     back_populates="machine", cascade="all")
