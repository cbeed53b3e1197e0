import pytest

from officedesk.models.common import ApprovalStatus
from officedesk.models.request import RequestInDB
from officedesk.services.approval import InvalidStatusError, resolve, resolve_request

P, A, R = "pending", "approved", "rejected"

ALL_COMBINATIONS = [
    (P, P, ApprovalStatus.PENDING),
    (P, A, ApprovalStatus.PENDING),
    (P, R, ApprovalStatus.REJECTED),
    (A, P, ApprovalStatus.PENDING),
    (A, A, ApprovalStatus.APPROVED),
    (A, R, ApprovalStatus.REJECTED),
    (R, P, ApprovalStatus.REJECTED),
    (R, A, ApprovalStatus.REJECTED),
    (R, R, ApprovalStatus.REJECTED),
]


@pytest.mark.parametrize("staff,admin,expected", ALL_COMBINATIONS)
def test_resolve_covers_every_combination(staff, admin, expected):
    assert resolve(staff, admin) is expected


@pytest.mark.parametrize("staff,admin,expected", ALL_COMBINATIONS)
def test_resolve_accepts_enum_members(staff, admin, expected):
    assert resolve(ApprovalStatus(staff), ApprovalStatus(admin)) is expected


def test_rejection_wins_over_existing_approval():
    """Un rechazo de cualquiera de las dos pistas anula la aprobación de la otra."""
    assert resolve("rejected", "approved") is ApprovalStatus.REJECTED
    assert resolve("approved", "rejected") is ApprovalStatus.REJECTED


def test_half_approved_stays_pending():
    assert resolve("approved", "pending") is ApprovalStatus.PENDING


@pytest.mark.parametrize("bad", ["Approved", "canceled", "", None, "APPROVED"])
def test_unknown_values_fail_fast(bad):
    """Valores fuera del conjunto cerrado no se convierten en pending en silencio."""
    with pytest.raises(InvalidStatusError):
        resolve(bad, "pending")
    with pytest.raises(InvalidStatusError):
        resolve("pending", bad)


def test_resolve_request_reads_dicts_and_models():
    doc = {"status_by_staff": "approved", "status_by_admin": "approved"}
    assert resolve_request(doc) is ApprovalStatus.APPROVED

    model = RequestInDB(
        service_id="svc", office_id="o1", user_id="u1", current_address="Bole",
        status_by_staff=ApprovalStatus.REJECTED,
    )
    assert resolve_request(model) is ApprovalStatus.REJECTED
