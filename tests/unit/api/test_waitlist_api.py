"""Tests for waitlist endpoints.

Endpoints under test:
- POST /api/waitlist
- GET  /api/waitlist/position
- GET  /api/waitlist/stats
- GET  /api/admin/waitlist
"""

from tests.unit.api.conftest import ADMIN_HEADERS


def _join(client, email, **extra):
    return client.post("/api/waitlist", json={"email": email, **extra})


class TestJoin:
    """POST /api/waitlist"""

    def test_first_member(self, client):
        resp = _join(client, "a@x.com", name="Ann")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "You're #1 on the waitlist!"
        assert body["position"] == 1
        assert body["total"] == 1
        assert body["referrals"] == 0
        assert len(body["refCode"]) == 8
        assert body["refCode"] == body["refCode"].upper()
        assert "duplicate" not in body

    def test_duplicate_keeps_rank(self, client):
        first = _join(client, "a@x.com").json()
        _join(client, "b@x.com")

        resp = _join(client, " A@X.COM ")

        body = resp.json()
        assert body["duplicate"] is True
        assert body["message"] == "Already on the waitlist!"
        assert body["position"] == 1
        assert body["refCode"] == first["refCode"]
        assert "total" not in body

    def test_invalid_email(self, client):
        resp = _join(client, "not-an-email")

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Invalid email address."}

    def test_unknown_ref_code_still_joins(self, client):
        resp = _join(client, "a@x.com", ref="NOPE1234")

        assert resp.status_code == 200
        [member] = client.get("/api/admin/waitlist", headers=ADMIN_HEADERS).json()["members"]
        assert member["referredBy"] == "NOPE1234"


class TestReferralFlow:
    def test_referral_credits_owner(self, client):
        a = _join(client, "a@x.com", name="Ann").json()
        assert a["position"] == 1

        b = _join(client, "b@x.com", ref=a["refCode"].lower()).json()
        assert b["position"] == 2
        assert b["refCode"] != a["refCode"]

        standing = client.get("/api/waitlist/position", params={"email": "a@x.com"}).json()
        assert standing == {
            "success": True,
            "position": 1,
            "total": 2,
            "refCode": a["refCode"],
            "referrals": 1,
        }

    def test_resubmission_does_not_credit_again(self, client):
        a = _join(client, "a@x.com").json()
        _join(client, "b@x.com", ref=a["refCode"])
        _join(client, "b@x.com", ref=a["refCode"])

        standing = client.get("/api/waitlist/position", params={"email": "a@x.com"}).json()
        assert standing["referrals"] == 1


class TestPosition:
    """GET /api/waitlist/position"""

    def test_unknown_email(self, client):
        resp = client.get("/api/waitlist/position", params={"email": "ghost@x.com"})

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Not found on waitlist."}

    def test_missing_email(self, client):
        resp = client.get("/api/waitlist/position")
        assert resp.status_code == 400


class TestStats:
    """GET /api/waitlist/stats"""

    def test_empty(self, client):
        resp = client.get("/api/waitlist/stats")
        assert resp.json() == {"success": True, "total": 0, "topReferrers": []}

    def test_leaderboard_hides_emails(self, client):
        a = _join(client, "ann@x.com").json()
        _join(client, "bob@x.com", name="Bob", ref=a["refCode"])

        body = client.get("/api/waitlist/stats").json()

        assert body["total"] == 2
        assert body["topReferrers"] == [{"name": "ann", "referrals": 1}]


class TestAdminWaitlist:
    """GET /api/admin/waitlist"""

    def test_dump(self, client):
        a = _join(client, "a@x.com").json()
        _join(client, "b@x.com", ref=a["refCode"])
        _join(client, "c@x.com", ref=a["refCode"])

        body = client.get("/api/admin/waitlist", headers=ADMIN_HEADERS).json()

        assert body["success"] is True
        assert body["count"] == 3
        assert body["totalReferrals"] == 2
        assert [m["email"] for m in body["members"]] == ["a@x.com", "b@x.com", "c@x.com"]
        assert body["members"][0]["referrals"] == 2
