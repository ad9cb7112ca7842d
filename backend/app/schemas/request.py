# app/schemas/request.py
from datetime import date, datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

RequestStatusLiteral = Literal["pendiente", "aprobada", "rechazada", "completada"]

# ---- Líneas de reserva ----
class ReservationLineIn(BaseModel):
    MachineID: int
    Quantity: int = Field(default=1, ge=1)

class ReservationLineOut(BaseModel):
    LineID: int
    MachineID: int
    Quantity: int
    MaintenanceID: Optional[int] = None
    model_config = ConfigDict(from_attributes=True)

class AssignedEmployeeOut(BaseModel):
    EmployeeID: int
    DocumentNo: str
    FirstName: str
    LastName: str
    model_config = ConfigDict(from_attributes=True)

# ---- Solicitudes ----
class RequestCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    CompanyID: int
    Code: str = Field(min_length=1, max_length=50)
    RequestDate: date
    ScheduledDate: date
    Description: str = Field(min_length=1, max_length=1000)
    MachineLines: List[ReservationLineIn] = Field(default_factory=list)
    EmployeeIDs: List[int] = Field(default_factory=list)
    # Si no llega se calcula como la suma de cantidades
    MachineCount: Optional[int] = Field(default=None, ge=1)
    Photos: List[str] = Field(default_factory=list)

class RequestUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    """Actualización parcial: solo cuentan los campos enviados (model_fields_set)."""
    CompanyID: Optional[int] = None
    Code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    RequestDate: Optional[date] = None
    ScheduledDate: Optional[date] = None
    Description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    MachineLines: Optional[List[ReservationLineIn]] = None   # reemplaza el conjunto completo
    EmployeeIDs: Optional[List[int]] = None                  # idem
    MachineCount: Optional[int] = Field(default=None, ge=1)
    Photos: Optional[List[str]] = None
    Status_s: Optional[RequestStatusLiteral] = None

class RequestOut(BaseModel):
    RequestID: int
    Code: str
    RequestDate: date
    ScheduledDate: date
    Description: str
    MachineCount: int
    Photos: List[str]
    Status_s: RequestStatusLiteral
    CompanyID: int
    CreatedAt: Optional[datetime] = None
    lines: List[ReservationLineOut] = []
    employees: List[AssignedEmployeeOut] = []
    model_config = ConfigDict(from_attributes=True)
