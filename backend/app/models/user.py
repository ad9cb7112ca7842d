from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, CheckConstraint, func, text
)
from ..core.db import Base
from ..domain.constants import USER_ROLES, sql_in

class AppUser(Base):
    __tablename__ = "AppUser"

    UserID         = Column(Integer, primary_key=True, autoincrement=True)
    Username       = Column(String(50),  nullable=False, unique=True)
    FullName       = Column(String(100))
    Email          = Column(String(200))
    HashedPassword = Column(String(255), nullable=False)
    Role           = Column(String(20),  nullable=False, server_default=text("'empleado'"))
    IsActive       = Column(Boolean,     nullable=False, server_default=text("1"))
    CreatedAt      = Column(DateTime,    nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        CheckConstraint(f"Role in ({sql_in(USER_ROLES)})", name="CK_AppUser_Role"),
    )
