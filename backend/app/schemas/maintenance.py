# app/schemas/maintenance.py
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer

# ---- Mantenimientos ----
class MaintenanceCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    Code: str = Field(min_length=1, max_length=100)
    Name: str = Field(min_length=1, max_length=255)
    Description: str = Field(min_length=1, max_length=1000)
    Cost: Decimal
    EstimatedHours: int
    ProcedureManual: Optional[str] = None
    DeliveryDate: date
    MachineID: int
    RequestID: Optional[int] = None

class MaintenanceUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    Code: Optional[str] = Field(default=None, min_length=1, max_length=100)
    Name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    Description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    Cost: Optional[Decimal] = None
    EstimatedHours: Optional[int] = None
    ProcedureManual: Optional[str] = None
    DeliveryDate: Optional[date] = None
    MachineID: Optional[int] = None
    RequestID: Optional[int] = None   # null explícito = desvincular de la solicitud

class MaintenanceOut(BaseModel):
    MaintenanceID: int
    Code: str
    Name: str
    Description: str
    Cost: Decimal
    EstimatedHours: int
    ProcedureManual: Optional[str] = None
    DeliveryDate: date
    MachineID: int
    RequestID: Optional[int] = None
    CreatedAt: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

    # JSON: número simple con 2 decimales
    @field_serializer("Cost")
    def _ser_cost(self, v: Decimal):
        return float(v)

class MaintenanceStats(BaseModel):
    total: int
    delivered: int
    pending: int
    total_cost: float
    average_cost: float
    delivered_pct: float
