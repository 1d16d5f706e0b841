"""
Tests for the legacy company login (email + access token) and the company
self-service endpoints.
"""
import pytest

from industrin.core import auth
from industrin.core.auth import COMPANY_LOGIN_FAILED
from industrin.core.rbac import Role
from industrin.core.security import (
    UNMATCHABLE_TOKEN_HASH,
    access_token_matches,
    create_access_token,
)
from industrin.models.company_user import CompanyUser
from tests.fixtures.directory_fixtures import approve, bearer, submit_claim


@pytest.fixture
def approved(client, companies, admin_headers):
    """Claim for rusty-support-ab by owner@example.com, approved."""
    claim = submit_claim(client, slug="rusty-support-ab", email="owner@example.com").json()
    resp = approve(client, claim["id"], admin_headers)
    assert resp.status_code == 200
    return resp.json()


def login(client, email, token):
    return client.post("/api/company/login", json={"email": email, "accessToken": token})


class TestClaimToLoginScenario:
    def test_full_flow(self, client, companies, admin_headers):
        claim = submit_claim(client, slug="rusty-support-ab", email="owner@example.com")
        assert claim.status_code == 201
        assert claim.json()["status"] == "pending"

        approval = approve(client, claim.json()["id"], admin_headers).json()
        token = approval["accessToken"]
        assert approval["companyUser"]["email"] == "owner@example.com"
        assert len(token) > 10

        ok = login(client, "owner@example.com", token)
        assert ok.status_code == 200, ok.text
        body = ok.json()
        assert body["companyUser"]["companyId"] == companies["rusty-support-ab"].id
        assert body["companyUser"]["company"]["slug"] == "rusty-support-ab"
        assert body["token"]

        bad = login(client, "owner@example.com", "wrong-token")
        assert bad.status_code == 401


class TestLoginFailures:
    """Every failure looks the same to the caller."""

    def test_wrong_token(self, client, approved):
        resp = login(client, "owner@example.com", "wrong-token")
        assert resp.status_code == 401
        assert resp.json()["error"]["message"] == COMPANY_LOGIN_FAILED

    def test_unknown_email(self, client, approved):
        resp = login(client, "nobody@example.com", approved["accessToken"])
        assert resp.status_code == 401
        assert resp.json()["error"]["message"] == COMPANY_LOGIN_FAILED

    def test_inactive_user(self, client, approved, admin_headers):
        cu_id = approved["companyUser"]["id"]
        resp = client.post(f"/api/admin/company-users/{cu_id}/deactivate", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["isActive"] is False

        resp = login(client, "owner@example.com", approved["accessToken"])
        assert resp.status_code == 401
        assert resp.json()["error"]["message"] == COMPANY_LOGIN_FAILED

    def test_email_is_case_insensitive(self, client, approved):
        resp = login(client, "Owner@Example.com", approved["accessToken"])
        assert resp.status_code == 200

    def test_login_leaves_company_user_row_unchanged(self, client, db, approved):
        def snapshot():
            db.expire_all()
            cu = db.get(CompanyUser, approved["companyUser"]["id"])
            return {c.name: getattr(cu, c.name) for c in CompanyUser.__table__.columns}

        before = snapshot()
        assert login(client, "owner@example.com", approved["accessToken"]).status_code == 200
        assert snapshot() == before

    @pytest.mark.parametrize(
        "email, token",
        [
            ("nobody@example.com", "whatever"),
            ("owner@example.com", "wrong-token"),
        ],
    )
    def test_every_failure_hashes_the_token(self, client, approved, monkeypatch, email, token):
        calls = []
        real = auth.access_token_matches

        def counting(presented, token_hash):
            calls.append(token_hash)
            return real(presented, token_hash)

        monkeypatch.setattr(auth, "access_token_matches", counting)
        resp = login(client, email, token)
        assert resp.status_code == 401
        assert len(calls) == 1

    def test_unmatchable_digest_never_matches(self):
        assert not access_token_matches("", UNMATCHABLE_TOKEN_HASH)
        assert not access_token_matches("anything", UNMATCHABLE_TOKEN_HASH)


class TestCompanySession:
    def test_verify_with_bearer(self, client, approved):
        token = login(client, "owner@example.com", approved["accessToken"]).json()["token"]
        client.cookies.clear()
        resp = client.get("/api/company/verify", headers=bearer(token))
        assert resp.status_code == 200
        assert resp.json()["email"] == "owner@example.com"
        assert resp.json()["company"]["slug"] == "rusty-support-ab"

    def test_verify_with_cookie(self, client, approved):
        assert login(client, "owner@example.com", approved["accessToken"]).status_code == 200
        resp = client.get("/api/company/verify")
        assert resp.status_code == 200

    def test_verify_without_credentials(self, client, companies):
        resp = client.get("/api/company/verify")
        assert resp.status_code == 401

    def test_verify_with_admin_token(self, client, companies, admin_headers):
        resp = client.get("/api/company/verify", headers=admin_headers)
        assert resp.status_code == 403

    def test_deactivation_ends_existing_sessions(self, client, approved, admin_headers):
        token = login(client, "owner@example.com", approved["accessToken"]).json()["token"]
        client.cookies.clear()
        client.post(
            f"/api/admin/company-users/{approved['companyUser']['id']}/deactivate",
            headers=admin_headers,
        )
        resp = client.get("/api/company/verify", headers=bearer(token))
        assert resp.status_code == 401

    def test_raw_access_token_is_not_a_session(self, client, approved):
        resp = client.get("/api/company/verify", headers=bearer(approved["accessToken"]))
        assert resp.status_code == 401


class TestCompanyProfile:
    @pytest.fixture
    def company_headers(self, approved):
        token = create_access_token(
            {"sub": approved["companyUser"]["id"], "role": Role.COMPANY.value}
        )
        return bearer(token)

    def test_get_own_profile(self, client, company_headers):
        resp = client.get("/api/company/profile", headers=company_headers)
        assert resp.status_code == 200
        assert resp.json()["slug"] == "rusty-support-ab"

    def test_update_descriptive_fields(self, client, company_headers):
        resp = client.put(
            "/api/company/profile",
            json={
                "description": "Vi servar pressar och svetsrobotar.",
                "phone": "08-765 43 21",
                "services": ["Service", "Service", " Reparation "],
            },
            headers=company_headers,
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["description"] == "Vi servar pressar och svetsrobotar."
        assert body["phone"] == "08-765 43 21"
        assert body["services"] == ["Service", "Reparation"]

    def test_admin_fields_are_ignored(self, client, company_headers):
        resp = client.put(
            "/api/company/profile",
            json={"slug": "hijack", "isFeatured": True, "isVerified": True, "region": "Skåne"},
            headers=company_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["slug"] == "rusty-support-ab"
        assert body["isFeatured"] is False
        assert body["isVerified"] is False
        assert body["region"] == "Stockholm"

    def test_profile_requires_company(self, client, companies):
        assert client.get("/api/company/profile").status_code == 401
