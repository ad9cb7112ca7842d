from sqlalchemy import Column, Integer, String, Date, DateTime, DECIMAL, ForeignKey, CheckConstraint, func, text
from sqlalchemy.orm import relationship
from ..core.db import Base
from ..domain.constants import PAYMENT_METHODS, PAYMENT_STATUSES, PAYMENT_STATUS_INITIAL, sql_in

class Payment(Base):
    __tablename__ = "Payment"

    PaymentID     = Column(Integer, primary_key=True, autoincrement=True)
    Code          = Column(String(50),  nullable=False, unique=True)
    PaymentDate   = Column(Date,        nullable=False)
    Amount        = Column(DECIMAL(12, 2), nullable=False)
    Method        = Column(String(20),  nullable=False)
    Reference     = Column(String(255))
    Status_s      = Column(String(20),  nullable=False, server_default=text(f"'{PAYMENT_STATUS_INITIAL}'"))
    Notes         = Column(String(1000))
    MaintenanceID = Column(Integer, ForeignKey("Maintenance.MaintenanceID", ondelete="CASCADE"), nullable=False)
    # No se valida contra la empresa de la máquina/solicitud del mantenimiento
    CompanyID     = Column(Integer, ForeignKey("Company.CompanyID", ondelete="CASCADE"), nullable=False)
    CreatedAt     = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        CheckConstraint("Amount >= 0", name="CK_Payment_Amount_NonNegative"),
        CheckConstraint(f"Method in ({sql_in(PAYMENT_METHODS)})",    name="CK_Payment_Method"),
        CheckConstraint(f"Status_s in ({sql_in(PAYMENT_STATUSES)})", name="CK_Payment_Status"),
    )

    maintenance = relationship("Maintenance", back_populates="payments")
    company     = relationship("Company",     back_populates="payments")
