from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..core.db import Base

class Company(Base):
    __tablename__ = "Company"

    CompanyID = Column(Integer, primary_key=True, autoincrement=True)
    TaxID     = Column(String(30),  nullable=False, unique=True)   # NIT
    Name      = Column(String(255), nullable=False, index=True)
    Address   = Column(String(255), nullable=False)
    City      = Column(String(100), nullable=False)
    Phone     = Column(String(20),  nullable=False)
    CreatedAt = Column(DateTime,    nullable=False, server_default=func.current_timestamp())

    # 0..1 representante
    representative = relationship(
        "Representative",
        back_populates="company",
        uselist=False,
        cascade="all",
    )

    # Las máquinas sobreviven a la empresa (CompanyID -> NULL)
    machines = relationship("Machine", back_populates="company")

    requests = relationship("ServiceRequest", back_populates="company", cascade="all")
    payments = relationship("Payment",        back_populates="company", cascade="all")


class Representative(Base):
    __tablename__ = "Representative"

    RepresentativeID = Column(Integer, primary_key=True, autoincrement=True)
    FullName   = Column(String(255), nullable=False)
    DocumentNo = Column(String(30),  nullable=False, unique=True)   # cédula
    Phone      = Column(String(20),  nullable=False)
    Email      = Column(String(255), nullable=False, unique=True)
    CompanyID  = Column(Integer, ForeignKey("Company.CompanyID", ondelete="CASCADE"), nullable=False, unique=True)

    company = relationship("Company", back_populates="representative")
