# app/schemas/catalog.py
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, EmailStr, Field

CategoryKindLiteral = Literal["ligera", "pesada"]
MachineStatusLiteral = Literal["disponible", "mantenimiento", "reparacion"]

# ---- Company ----
class CompanyCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    TaxID: str = Field(min_length=1, max_length=30)
    Name: str = Field(min_length=1, max_length=255)
    Address: str = Field(min_length=1, max_length=255)
    City: str = Field(min_length=1, max_length=100)
    Phone: str = Field(min_length=1, max_length=20)

class CompanyUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    TaxID: Optional[str] = Field(default=None, min_length=1, max_length=30)
    Name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    Address: Optional[str] = Field(default=None, min_length=1, max_length=255)
    City: Optional[str] = Field(default=None, min_length=1, max_length=100)
    Phone: Optional[str] = Field(default=None, min_length=1, max_length=20)

# ---- Representative ----
class RepresentativeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    FullName: str = Field(min_length=1, max_length=255)
    DocumentNo: str = Field(min_length=1, max_length=30)
    Phone: str = Field(min_length=1, max_length=20)
    Email: EmailStr
    CompanyID: int

class RepresentativeUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    FullName: Optional[str] = Field(default=None, min_length=1, max_length=255)
    DocumentNo: Optional[str] = Field(default=None, min_length=1, max_length=30)
    Phone: Optional[str] = Field(default=None, min_length=1, max_length=20)
    Email: Optional[EmailStr] = None
    CompanyID: Optional[int] = None

class RepresentativeOut(BaseModel):
    RepresentativeID: int
    FullName: str
    DocumentNo: str
    Phone: str
    Email: str
    CompanyID: int
    model_config = ConfigDict(from_attributes=True)

class CompanyOut(BaseModel):
    CompanyID: int
    TaxID: str
    Name: str
    Address: str
    City: str
    Phone: str
    CreatedAt: Optional[datetime] = None
    representative: Optional[RepresentativeOut] = None
    model_config = ConfigDict(from_attributes=True)

# ---- MachineCategory ----
class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    Kind: CategoryKindLiteral
    Description: str = Field(min_length=1, max_length=500)

class CategoryUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    Kind: Optional[CategoryKindLiteral] = None
    Description: Optional[str] = Field(default=None, min_length=1, max_length=500)

class CategoryOut(BaseModel):
    CategoryID: int
    Kind: CategoryKindLiteral
    Description: str
    model_config = ConfigDict(from_attributes=True)

# ---- Machine ----
class MachineCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    MachineType: str = Field(min_length=1, max_length=255)
    Name: str = Field(min_length=1, max_length=200)
    CategoryID: int
    CompanyID: Optional[int] = None
    Status_s: MachineStatusLiteral = "disponible"

class MachineUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    MachineType: Optional[str] = Field(default=None, min_length=1, max_length=255)
    Name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    CategoryID: Optional[int] = None
    CompanyID: Optional[int] = None   # null explícito = desvincular de la empresa
    Status_s: Optional[MachineStatusLiteral] = None

class MachineOut(BaseModel):
    MachineID: int
    MachineType: str
    Name: str
    CategoryID: int
    CompanyID: Optional[int]
    Status_s: MachineStatusLiteral
    category: Optional[CategoryOut] = None
    model_config = ConfigDict(from_attributes=True)
