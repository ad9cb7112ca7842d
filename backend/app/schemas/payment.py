# app/schemas/payment.py
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field, field_serializer

PaymentMethodLiteral = Literal["efectivo", "tarjeta", "transferencia"]
PaymentStatusLiteral = Literal["pendiente", "completado", "rechazado"]

class PaymentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    Code: str = Field(min_length=1, max_length=50)
    PaymentDate: date
    Amount: Decimal
    Method: PaymentMethodLiteral
    Reference: Optional[str] = Field(default=None, max_length=255)
    Status_s: PaymentStatusLiteral = "pendiente"
    Notes: Optional[str] = Field(default=None, max_length=1000)
    MaintenanceID: int
    CompanyID: int

class PaymentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    Code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    PaymentDate: Optional[date] = None
    Amount: Optional[Decimal] = None
    Method: Optional[PaymentMethodLiteral] = None
    Reference: Optional[str] = Field(default=None, max_length=255)
    Status_s: Optional[PaymentStatusLiteral] = None
    Notes: Optional[str] = Field(default=None, max_length=1000)
    MaintenanceID: Optional[int] = None
    CompanyID: Optional[int] = None

class PaymentOut(BaseModel):
    PaymentID: int
    Code: str
    PaymentDate: date
    Amount: Decimal
    Method: PaymentMethodLiteral
    Reference: Optional[str] = None
    Status_s: PaymentStatusLiteral
    Notes: Optional[str] = None
    MaintenanceID: int
    CompanyID: int
    CreatedAt: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

    @field_serializer("Amount")
    def _ser_amount(self, v: Decimal):
        return float(v)
