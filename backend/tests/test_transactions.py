import pytest
from sqlalchemy.exc import IntegrityError

from app.core.errors import Conflict, ValidationError
from app.services.common import transaction


def _integrity(msg: str) -> IntegrityError:
    return IntegrityError("INSERT INTO ...", {}, Exception(msg))


@pytest.mark.parametrize("msg", [
    "UNIQUE constraint failed: ServiceRequest.Code",
    "Violation of UNIQUE KEY constraint 'UQ_ServiceRequest_Code'. "
    "The duplicate key value is (CHECKLIST-01).",
    'duplicate key value violates unique constraint "uq_payment_code" DETAIL: Key ("Code")=(CHECK-7)',
])
def test_unique_violation_is_conflict(db, msg):
    with pytest.raises(Conflict) as exc:
        with transaction(db, "create_request"):
            raise _integrity(msg)
    assert exc.value.status_code == 409


@pytest.mark.parametrize("msg", [
    "CHECK constraint failed: ck_payment_amount",
    'The INSERT statement conflicted with the CHECK constraint "CK_Payment_Amount".',
    'new row for relation "Payment" violates check constraint "ck_payment_amount"',
])
def test_check_violation_is_validation(db, msg):
    with pytest.raises(ValidationError) as exc:
        with transaction(db, "create_payment"):
            raise _integrity(msg)
    assert exc.value.status_code == 422
