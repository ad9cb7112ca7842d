"""baseline club schema

Revision ID: 5c1f0a9e2b71
Revises:
Create Date: 2026-10-19 10:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1f0a9e2b71'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "Company",
        sa.Column("CompanyID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("TaxID", sa.String(30), nullable=False, unique=True),
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Address", sa.String(255), nullable=False),
        sa.Column("City", sa.String(100), nullable=False),
        sa.Column("Phone", sa.String(20), nullable=False),
        sa.Column("CreatedAt", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_Company_Name", "Company", ["Name"])

    op.create_table(
        "Representative",
        sa.Column("RepresentativeID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("FullName", sa.String(255), nullable=False),
        sa.Column("DocumentNo", sa.String(30), nullable=False, unique=True),
        sa.Column("Phone", sa.String(20), nullable=False),
        sa.Column("Email", sa.String(255), nullable=False, unique=True),
        sa.Column("CompanyID", sa.Integer,
                  sa.ForeignKey("Company.CompanyID", ondelete="CASCADE"), nullable=False, unique=True),
    )

    op.create_table(
        "MachineCategory",
        sa.Column("CategoryID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("Kind", sa.String(20), nullable=False),
        sa.Column("Description", sa.String(500), nullable=False),
        sa.CheckConstraint("Kind in ('ligera','pesada')", name="CK_MachineCategory_Kind"),
    )

    op.create_table(
        "Machine",
        sa.Column("MachineID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("MachineType", sa.String(255), nullable=False),
        sa.Column("Name", sa.String(200), nullable=False),
        sa.Column("CategoryID", sa.Integer,
                  sa.ForeignKey("MachineCategory.CategoryID", ondelete="CASCADE"), nullable=False),
        sa.Column("CompanyID", sa.Integer, sa.ForeignKey("Company.CompanyID", ondelete="SET NULL")),
        sa.Column("Status_s", sa.String(20), nullable=False, server_default=sa.text("'disponible'")),
        sa.Column("CreatedAt", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("Status_s in ('disponible','mantenimiento','reparacion')", name="CK_Machine_Status"),
    )
    op.create_index("ix_Machine_MachineType", "Machine", ["MachineType"])

    op.create_table(
        "Position",
        sa.Column("PositionID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(255), nullable=False, unique=True),
        sa.Column("Description", sa.String(500), nullable=False),
    )

    op.create_table(
        "Employee",
        sa.Column("EmployeeID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("DocumentNo", sa.String(20), nullable=False, unique=True),
        sa.Column("FirstName", sa.String(255), nullable=False),
        sa.Column("LastName", sa.String(255), nullable=False),
        sa.Column("Phone", sa.String(20), nullable=False),
        sa.Column("Email", sa.String(255)),
        sa.Column("PositionID", sa.Integer,
                  sa.ForeignKey("Position.PositionID", ondelete="CASCADE"), nullable=False),
    )

    op.create_table(
        "ServiceRequest",
        sa.Column("RequestID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("Code", sa.String(50), nullable=False, unique=True),
        sa.Column("RequestDate", sa.Date, nullable=False),
        sa.Column("ScheduledDate", sa.Date, nullable=False),
        sa.Column("Description", sa.String(1000), nullable=False),
        sa.Column("MachineCount", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("Photos", sa.JSON, nullable=False),
        sa.Column("Status_s", sa.String(20), nullable=False, server_default=sa.text("'pendiente'")),
        sa.Column("CompanyID", sa.Integer,
                  sa.ForeignKey("Company.CompanyID", ondelete="CASCADE"), nullable=False),
        sa.Column("CreatedAt", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("UpdatedAt", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint(
            "Status_s in ('pendiente','aprobada','rechazada','completada')", name="CK_Request_Status"
        ),
    )

    op.create_table(
        "RequestEmployee",
        sa.Column("RequestID", sa.Integer,
                  sa.ForeignKey("ServiceRequest.RequestID", ondelete="CASCADE"), primary_key=True),
        sa.Column("EmployeeID", sa.Integer,
                  sa.ForeignKey("Employee.EmployeeID", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "Maintenance",
        sa.Column("MaintenanceID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("Code", sa.String(100), nullable=False, unique=True),
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.String(1000), nullable=False),
        sa.Column("Cost", sa.DECIMAL(12, 2), nullable=False),
        sa.Column("EstimatedHours", sa.Integer, nullable=False),
        sa.Column("ProcedureManual", sa.Text),
        sa.Column("DeliveryDate", sa.Date, nullable=False),
        sa.Column("MachineID", sa.Integer,
                  sa.ForeignKey("Machine.MachineID", ondelete="CASCADE"), nullable=False),
        sa.Column("RequestID", sa.Integer, sa.ForeignKey("ServiceRequest.RequestID", ondelete="SET NULL")),
        sa.Column("CreatedAt", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("Cost >= 0", name="CK_Maintenance_Cost_NonNegative"),
        sa.CheckConstraint("EstimatedHours BETWEEN 1 AND 720", name="CK_Maintenance_EstimatedHours"),
    )
    op.create_index("ix_Maintenance_DeliveryDate", "Maintenance", ["DeliveryDate"])

    op.create_table(
        "ReservationLine",
        sa.Column("LineID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("RequestID", sa.Integer,
                  sa.ForeignKey("ServiceRequest.RequestID", ondelete="CASCADE"), nullable=False),
        sa.Column("MachineID", sa.Integer,
                  sa.ForeignKey("Machine.MachineID", ondelete="CASCADE"), nullable=False),
        sa.Column("Quantity", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("MaintenanceID", sa.Integer,
                  sa.ForeignKey("Maintenance.MaintenanceID", ondelete="SET NULL")),
        sa.CheckConstraint("Quantity >= 1", name="CK_ReservationLine_Quantity"),
        sa.UniqueConstraint("RequestID", "MachineID", name="UQ_ReservationLine_Request_Machine"),
    )

    op.create_table(
        "Payment",
        sa.Column("PaymentID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("Code", sa.String(50), nullable=False, unique=True),
        sa.Column("PaymentDate", sa.Date, nullable=False),
        sa.Column("Amount", sa.DECIMAL(12, 2), nullable=False),
        sa.Column("Method", sa.String(20), nullable=False),
        sa.Column("Reference", sa.String(255)),
        sa.Column("Status_s", sa.String(20), nullable=False, server_default=sa.text("'pendiente'")),
        sa.Column("Notes", sa.String(1000)),
        sa.Column("MaintenanceID", sa.Integer,
                  sa.ForeignKey("Maintenance.MaintenanceID", ondelete="CASCADE"), nullable=False),
        sa.Column("CompanyID", sa.Integer,
                  sa.ForeignKey("Company.CompanyID", ondelete="CASCADE"), nullable=False),
        sa.Column("CreatedAt", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("Amount >= 0", name="CK_Payment_Amount_NonNegative"),
        sa.CheckConstraint("Method in ('efectivo','tarjeta','transferencia')", name="CK_Payment_Method"),
        sa.CheckConstraint("Status_s in ('pendiente','completado','rechazado')", name="CK_Payment_Status"),
    )

    op.create_table(
        "AppUser",
        sa.Column("UserID", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("Username", sa.String(50), nullable=False, unique=True),
        sa.Column("FullName", sa.String(100)),
        sa.Column("Email", sa.String(200)),
        sa.Column("HashedPassword", sa.String(255), nullable=False),
        sa.Column("Role", sa.String(20), nullable=False, server_default=sa.text("'empleado'")),
        sa.Column("IsActive", sa.Boolean, nullable=False, server_default=sa.text("1")),
        sa.Column("CreatedAt", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("Role in ('admin','empleado')", name="CK_AppUser_Role"),
    )


def downgrade():
    # orden inverso a las FK
    for table in (
        "AppUser", "Payment", "ReservationLine", "Maintenance", "RequestEmployee",
        "ServiceRequest", "Employee", "Position", "Machine", "MachineCategory",
        "Representative", "Company",
    ):
        op.drop_table(table)
