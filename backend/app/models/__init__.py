from .company import Company, Representative
from .machine import Machine, MachineCategory
from .employee import Employee, Position
from .service_request import ServiceRequest, ReservationLine, request_employee
from .maintenance import Maintenance
from .payment import Payment
from .user import AppUser
__all__ = [
    "Company", "Representative",
    "Machine", "MachineCategory",
    "Employee", "Position",
    "ServiceRequest", "ReservationLine", "request_employee",
    "Maintenance", "Payment", "AppUser",
]
