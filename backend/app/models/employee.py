from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from ..core.db import Base

class Position(Base):
    __tablename__ = "Position"   # cargo

    PositionID  = Column(Integer, primary_key=True, autoincrement=True)
    Name        = Column(String(255), nullable=False, unique=True)
    Description = Column(String(500), nullable=False)

    employees = relationship("Employee", back_populates="position", cascade="all")


class Employee(Base):
    __tablename__ = "Employee"

    EmployeeID = Column(Integer, primary_key=True, autoincrement=True)
    DocumentNo = Column(String(20),  nullable=False, unique=True)
    FirstName  = Column(String(255), nullable=False)
    LastName   = Column(String(255), nullable=False)
    Phone      = Column(String(20),  nullable=False)
    Email      = Column(String(255))
    PositionID = Column(Integer, ForeignKey("Position.PositionID", ondelete="CASCADE"), nullable=False)

    position = relationship("Position", back_populates="employees")
    requests = relationship("ServiceRequest", secondary="RequestEmployee", back_populates="employees")
