# app/schemas/directory.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

# ---- Position (cargo) ----
class PositionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    Name: str = Field(min_length=1, max_length=255)
    Description: str = Field(min_length=1, max_length=500)

class PositionUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    Name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    Description: Optional[str] = Field(default=None, min_length=1, max_length=500)

class PositionOut(BaseModel):
    PositionID: int
    Name: str
    Description: str
    model_config = ConfigDict(from_attributes=True)

# ---- Employee ----
class EmployeeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    DocumentNo: str = Field(min_length=1, max_length=20)
    FirstName: str = Field(min_length=1, max_length=255)
    LastName: str = Field(min_length=1, max_length=255)
    Phone: str = Field(min_length=1, max_length=20)
    Email: Optional[EmailStr] = None
    PositionID: int

class EmployeeUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)
    DocumentNo: Optional[str] = Field(default=None, min_length=1, max_length=20)
    FirstName: Optional[str] = Field(default=None, min_length=1, max_length=255)
    LastName: Optional[str] = Field(default=None, min_length=1, max_length=255)
    Phone: Optional[str] = Field(default=None, min_length=1, max_length=20)
    Email: Optional[EmailStr] = None
    PositionID: Optional[int] = None

class EmployeeOut(BaseModel):
    EmployeeID: int
    DocumentNo: str
    FirstName: str
    LastName: str
    Phone: str
    Email: Optional[str] = None
    PositionID: int
    position: Optional[PositionOut] = None
    model_config = ConfigDict(from_attributes=True)
