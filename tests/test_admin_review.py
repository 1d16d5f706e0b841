"""
Tests for admin review of claims: approve / reject state machine, company
user creation, conflicts and transactional behaviour.
"""
import pytest
from sqlalchemy import update

from industrin.core.errors import AuthenticationFailed, Conflict, NotFound, PermissionDenied
from industrin.core.rbac import ANONYMOUS, Principal, Role
from industrin.core.security import create_access_token, hash_access_token
from industrin.models.claim_request import ClaimRequest
from industrin.models.company_user import CompanyUser
from industrin.services import claims as claims_service
from tests.fixtures.directory_fixtures import approve, bearer, submit_claim


@pytest.fixture
def pending_claim(client, companies):
    resp = submit_claim(client)
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Approve
# ---------------------------------------------------------------------------

class TestApprove:
    """Approving a pending claim creates exactly one company user."""

    def test_approve_pending_claim(self, client, db, pending_claim, admin_user, admin_headers):
        resp = approve(client, pending_claim["id"], admin_headers)
        assert resp.status_code == 200, resp.text
        body = resp.json()

        claim = body["claimRequest"]
        assert claim["status"] == "approved"
        assert claim["reviewedAt"] is not None
        assert claim["reviewedBy"] == admin_user.id

        token = body["accessToken"]
        assert len(token) > 10

        users = db.query(CompanyUser).all()
        assert len(users) == 1
        cu = users[0]
        assert cu.email == "owner@example.com"
        assert cu.company_id == pending_claim["companyId"]
        assert cu.claim_request_id == pending_claim["id"]
        assert cu.is_active is True
        # only the digest is stored
        assert cu.access_token_hash == hash_access_token(token)
        assert cu.access_token_hash != token

    def test_approve_twice_conflicts(self, client, db, pending_claim, admin_headers):
        assert approve(client, pending_claim["id"], admin_headers).status_code == 200
        resp = approve(client, pending_claim["id"], admin_headers)
        assert resp.status_code == 409
        assert db.query(CompanyUser).count() == 1

    def test_approve_rejected_claim_conflicts(self, client, db, pending_claim, admin_headers):
        client.post(f"/api/admin/claim-requests/{pending_claim['id']}/reject", headers=admin_headers)
        resp = approve(client, pending_claim["id"], admin_headers)
        assert resp.status_code == 409
        assert db.query(CompanyUser).count() == 0

    def test_approve_unknown_claim(self, client, admin_headers, companies):
        resp = approve(client, "does-not-exist", admin_headers)
        assert resp.status_code == 404

    def test_tokens_are_unique(self, client, db, companies, admin_headers):
        first = submit_claim(client, slug="rusty-support-ab", email="a@example.com").json()
        second = submit_claim(client, slug="hydrotech-solutions", email="b@example.com").json()

        t1 = approve(client, first["id"], admin_headers).json()["accessToken"]
        t2 = approve(client, second["id"], admin_headers).json()["accessToken"]
        assert t1 != t2
        hashes = {cu.access_token_hash for cu in db.query(CompanyUser).all()}
        assert len(hashes) == 2


class TestApproveConflicts:
    """Approval refuses to create a second binding."""

    def test_company_with_active_user_conflicts(self, client, db, companies, admin_headers):
        first = submit_claim(client, email="owner@example.com").json()
        second = submit_claim(client, email="other@example.com").json()
        assert approve(client, first["id"], admin_headers).status_code == 200

        resp = approve(client, second["id"], admin_headers)
        assert resp.status_code == 409
        assert db.query(CompanyUser).count() == 1
        db.expire_all()
        assert db.get(ClaimRequest, second["id"]).status == "pending"

    def test_single_user_rule_can_be_disabled(
        self, client, db, companies, admin_headers, monkeypatch
    ):
        monkeypatch.setenv("ENFORCE_SINGLE_COMPANY_USER", "0")
        first = submit_claim(client, email="owner@example.com").json()
        second = submit_claim(client, email="other@example.com").json()
        assert approve(client, first["id"], admin_headers).status_code == 200
        assert approve(client, second["id"], admin_headers).status_code == 200
        assert db.query(CompanyUser).count() == 2

    @pytest.mark.parametrize("value, expected", [(None, True), ("1", True), ("0", False)])
    def test_single_user_rule_follows_environment(self, monkeypatch, value, expected):
        if value is None:
            monkeypatch.delenv("ENFORCE_SINGLE_COMPANY_USER", raising=False)
        else:
            monkeypatch.setenv("ENFORCE_SINGLE_COMPANY_USER", value)
        assert claims_service.single_company_user_enforced() is expected

    def test_existing_email_conflicts(self, client, db, companies, admin_headers):
        first = submit_claim(client, slug="rusty-support-ab", email="owner@example.com").json()
        second = submit_claim(client, slug="hydrotech-solutions", email="OWNER@example.com").json()
        assert approve(client, first["id"], admin_headers).status_code == 200

        resp = approve(client, second["id"], admin_headers)
        assert resp.status_code == 409
        assert db.query(CompanyUser).count() == 1


class TestApproveAtomicity:
    """A failure mid-approval leaves neither write behind."""

    def test_failure_after_user_insert_rolls_back(
        self, client, db, pending_claim, admin_principal, monkeypatch
    ):
        def boom(*args, **kwargs):
            raise RuntimeError("simulated failure")

        monkeypatch.setattr(claims_service, "_transition", boom)

        with pytest.raises(RuntimeError):
            claims_service.approve_claim(db, pending_claim["id"], admin_principal)

        assert db.query(CompanyUser).count() == 0
        assert db.get(ClaimRequest, pending_claim["id"]).status == "pending"

    def test_concurrent_review_loses_compare_and_set(
        self, client, db, pending_claim, admin_principal, monkeypatch
    ):
        stale = db.get(ClaimRequest, pending_claim["id"])
        # another reviewer got there first
        db.execute(
            update(ClaimRequest)
            .where(ClaimRequest.id == pending_claim["id"])
            .values(status="rejected")
        )
        db.commit()
        monkeypatch.setattr(claims_service, "_load_claim", lambda _db, _id: stale)

        with pytest.raises(Conflict):
            claims_service.approve_claim(db, pending_claim["id"], admin_principal)

        assert db.query(CompanyUser).count() == 0
        db.expire_all()
        assert db.get(ClaimRequest, pending_claim["id"]).status == "rejected"

    def test_service_requires_admin(self, db, pending_claim):
        company = Principal(role=Role.COMPANY, subject="cu-1", company_id="c-1")
        with pytest.raises(PermissionDenied):
            claims_service.approve_claim(db, pending_claim["id"], company)
        with pytest.raises(AuthenticationFailed):
            claims_service.reject_claim(db, pending_claim["id"], ANONYMOUS)


# ---------------------------------------------------------------------------
# Reject
# ---------------------------------------------------------------------------

class TestReject:
    def test_reject_pending_claim(self, client, db, pending_claim, admin_user, admin_headers):
        resp = client.post(
            f"/api/admin/claim-requests/{pending_claim['id']}/reject",
            json={"notes": "Kunde inte verifiera"},
            headers=admin_headers,
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["status"] == "rejected"
        assert body["reviewedAt"] is not None
        assert body["reviewedBy"] == admin_user.id
        assert body["reviewNotes"] == "Kunde inte verifiera"
        assert db.query(CompanyUser).count() == 0

    def test_reject_without_body(self, client, pending_claim, admin_headers):
        resp = client.post(
            f"/api/admin/claim-requests/{pending_claim['id']}/reject", headers=admin_headers
        )
        assert resp.status_code == 200
        assert resp.json()["reviewNotes"] is None

    def test_reject_approved_claim_conflicts(self, client, pending_claim, admin_headers):
        assert approve(client, pending_claim["id"], admin_headers).status_code == 200
        resp = client.post(
            f"/api/admin/claim-requests/{pending_claim['id']}/reject", headers=admin_headers
        )
        assert resp.status_code == 409

    def test_reject_unknown_claim(self, db, admin_principal, companies):
        with pytest.raises(NotFound):
            claims_service.reject_claim(db, "missing", admin_principal)


# ---------------------------------------------------------------------------
# Access control and listing
# ---------------------------------------------------------------------------

class TestAdminAccess:
    def test_anonymous_gets_401(self, client, pending_claim):
        resp = approve(client, pending_claim["id"], {})
        assert resp.status_code == 401
        assert resp.headers.get("WWW-Authenticate") == "Bearer"

    def test_company_principal_gets_403(self, client, db, pending_claim, admin_headers):
        approval = approve(client, pending_claim["id"], admin_headers).json()
        company_token = create_access_token(
            {"sub": approval["companyUser"]["id"], "role": Role.COMPANY.value}
        )
        resp = client.get("/api/admin/claim-requests", headers=bearer(company_token))
        assert resp.status_code == 403

    def test_list_claims_filters_by_status(self, client, companies, admin_headers):
        first = submit_claim(client, email="a@example.com").json()
        submit_claim(client, slug="hydrotech-solutions", email="b@example.com")
        client.post(f"/api/admin/claim-requests/{first['id']}/reject", headers=admin_headers)

        pending = client.get(
            "/api/admin/claim-requests", params={"status": "pending"}, headers=admin_headers
        ).json()
        assert [c["email"] for c in pending] == ["b@example.com"]
        assert pending[0]["company"]["slug"] == "hydrotech-solutions"

        everything = client.get("/api/admin/claim-requests", headers=admin_headers).json()
        assert len(everything) == 2

    def test_list_claims_unknown_status(self, client, admin_headers, companies):
        resp = client.get(
            "/api/admin/claim-requests", params={"status": "bogus"}, headers=admin_headers
        )
        assert resp.status_code == 400

    def test_stats(self, client, companies, admin_headers):
        first = submit_claim(client, email="a@example.com").json()
        submit_claim(client, slug="hydrotech-solutions", email="b@example.com")
        approve(client, first["id"], admin_headers)

        stats = client.get("/api/admin/stats", headers=admin_headers).json()
        assert stats["totalCompanies"] == 4
        assert stats["pendingClaims"] == 1
        assert stats["approvedClaims"] == 1
        assert stats["rejectedClaims"] == 0
        assert stats["activeCompanyUsers"] == 1
        assert stats["totalQuoteRequests"] == 0
