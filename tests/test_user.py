"""Tests for profile, preferences, contacts and account withdrawal."""

import pytest

from last_leaf.models import Contact, Diary, IdleThreshold, TimerStatus, User
from tests.helpers import use_token

DAY = 24 * 60 * 60


@pytest.fixture
def member(client, make_user):
    """A registered user whose session the client carries."""
    user, token = make_user("member@example.com", nickname="Member")
    use_token(client, token)
    return user


class TestProfile:
    """Tests for /api/user/profile."""

    def test_get_profile(self, client, member):
        response = client.get("/api/user/profile")
        assert response.status_code == 200
        profile = response.json()["user"]
        assert profile["user_id"] == member.id
        assert profile["email"] == "member@example.com"
        assert profile["nickname"] == "Member"
        assert profile["name"] is None
        assert profile["timer_status"] == "inactive"
        assert profile["timer_idle_threshold_sec"] == 30 * DAY
        assert "password_hash" not in profile

    def test_update_profile(self, client, member):
        response = client.put("/api/user/profile", json={"nickname": "New", "name": "Full Name"})
        assert response.status_code == 200
        profile = response.json()["user"]
        assert profile["nickname"] == "New"
        assert profile["name"] == "Full Name"

    def test_update_name_only_keeps_nickname(self, client, member):
        response = client.put("/api/user/profile", json={"name": "Only Name"})
        assert response.status_code == 200
        assert response.json()["user"]["nickname"] == "Member"

    def test_email_is_immutable(self, client, member, db):
        response = client.put(
            "/api/user/profile", json={"nickname": "Still", "email": "other@example.com"}
        )
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "member@example.com"
        db.refresh(member)
        assert member.email == "member@example.com"

    def test_blank_nickname_rejected(self, client, member):
        response = client.put("/api/user/profile", json={"nickname": "  "})
        assert response.status_code == 400
        assert response.json() == {"error": "Nickname cannot be empty"}

    def test_requires_a_field(self, client, member):
        response = client.put("/api/user/profile", json={})
        assert response.status_code == 400
        assert response.json() == {
            "error": "At least one field (nickname or name) must be provided"
        }


class TestPreferences:
    """Tests for /api/user/preferences."""

    def test_get_defaults(self, client, member):
        response = client.get("/api/user/preferences")
        assert response.status_code == 200
        assert response.json() == {
            "timer_status": "inactive",
            "timer_idle_threshold_sec": 2592000,
        }

    @pytest.mark.parametrize("raw", ["ACTIVE", "active", "Active"])
    def test_status_is_case_insensitive(self, client, member, db, raw):
        response = client.put("/api/user/preferences", json={"timer_status": raw})
        assert response.status_code == 200
        assert response.json()["timer_status"] == "active"
        db.refresh(member)
        assert member.timer_status == TimerStatus.ACTIVE

    def test_update_threshold(self, client, member):
        response = client.put(
            "/api/user/preferences", json={"timer_idle_threshold_sec": 90 * DAY}
        )
        assert response.status_code == 200
        assert response.json() == {
            "timer_status": "inactive",
            "timer_idle_threshold_sec": 90 * DAY,
        }

    def test_update_both(self, client, member):
        response = client.put(
            "/api/user/preferences",
            json={"timer_status": "PAUSED", "timer_idle_threshold_sec": 180 * DAY},
        )
        assert response.json() == {"timer_status": "paused", "timer_idle_threshold_sec": 180 * DAY}

    def test_invalid_status(self, client, member):
        response = client.put("/api/user/preferences", json={"timer_status": "SNOOZED"})
        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid timer_status. Must be PAUSED, ACTIVE, or INACTIVE"
        }

    @pytest.mark.parametrize("value", [DAY, 45 * DAY, 0, -1])
    def test_threshold_outside_allow_list(self, client, member, value):
        response = client.put("/api/user/preferences", json={"timer_idle_threshold_sec": value})
        assert response.status_code == 400
        allowed = ", ".join(str(v) for v in IdleThreshold.values())
        assert response.json() == {
            "error": f"Invalid timer_idle_threshold_sec. Must be one of: {allowed}"
        }

    @pytest.mark.parametrize("value", ["2592000", True])
    def test_threshold_must_be_number(self, client, member, value):
        response = client.put("/api/user/preferences", json={"timer_idle_threshold_sec": value})
        assert response.status_code == 400
        assert response.json() == {"error": "timer_idle_threshold_sec must be a number"}

    def test_requires_a_field(self, client, member):
        response = client.put("/api/user/preferences", json={})
        assert response.status_code == 400
        assert "At least one field" in response.json()["error"]


class TestContacts:
    """Tests for /api/user/contacts."""

    def test_empty_list(self, client, member):
        response = client.get("/api/user/contacts")
        assert response.status_code == 200
        assert response.json() == {"contacts": []}

    def test_replace_contacts(self, client, member, db):
        response = client.put(
            "/api/user/contacts",
            json={
                "contacts": [
                    {"email": "friend@example.com", "phone": "+15555550100"},
                    {"phone": "+15555550101"},
                ]
            },
        )
        assert response.status_code == 200
        saved = response.json()["contacts"]
        assert len(saved) == 2
        assert saved[0]["email"] == "friend@example.com"
        assert saved[1]["email"] is None
        assert all(c["contact_id"] for c in saved)

        response = client.put(
            "/api/user/contacts", json={"contacts": [{"email": "sister@example.com"}]}
        )
        assert [c["email"] for c in response.json()["contacts"]] == ["sister@example.com"]
        assert db.query(Contact).filter(Contact.user_id == member.id).count() == 1

        listed = client.get("/api/user/contacts").json()["contacts"]
        assert [c["email"] for c in listed] == ["sister@example.com"]

    def test_empty_replacement_clears_list(self, client, member, db):
        client.put("/api/user/contacts", json={"contacts": [{"email": "a@example.com"}]})
        response = client.put("/api/user/contacts", json={"contacts": []})
        assert response.json() == {"contacts": []}
        assert db.query(Contact).count() == 0

    def test_blank_email_is_allowed(self, client, member):
        response = client.put(
            "/api/user/contacts", json={"contacts": [{"email": "", "phone": "+1555"}]}
        )
        assert response.status_code == 200
        assert response.json()["contacts"][0]["email"] is None

    def test_invalid_email(self, client, member, db):
        response = client.put(
            "/api/user/contacts", json={"contacts": [{"email": "not-an-email"}]}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid email format: not-an-email"}

    def test_contacts_field_required(self, client, member):
        response = client.put("/api/user/contacts", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "contacts field is required"}

    def test_contacts_must_be_array(self, client, member):
        response = client.put("/api/user/contacts", json={"contacts": "a@example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "contacts must be an array"}

    def test_contacts_are_per_user(self, client, member, make_user):
        client.put("/api/user/contacts", json={"contacts": [{"email": "mine@example.com"}]})

        _, other_token = make_user("other@example.com")
        use_token(client, other_token)
        assert client.get("/api/user/contacts").json() == {"contacts": []}


class TestWithdraw:
    """Tests for DELETE /api/user."""

    def test_delete_account_cascades(self, client, member, db):
        db.add(Diary(user_id=member.id, content="secret"))
        db.add(Contact(user_id=member.id, email="friend@example.com"))
        db.commit()
        member_id = member.id

        response = client.delete("/api/user")
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Account deleted successfully"}
        assert "Max-Age=0" in response.headers["set-cookie"]

        db.expire_all()
        assert db.query(User).filter(User.id == member_id).count() == 0
        assert db.query(Diary).filter(Diary.user_id == member_id).count() == 0
        assert db.query(Contact).filter(Contact.user_id == member_id).count() == 0

    def test_other_users_are_untouched(self, client, member, make_user, db):
        other, _ = make_user("keep@example.com")
        db.add(Diary(user_id=other.id, content="still here"))
        db.commit()

        client.delete("/api/user")
        assert db.query(Diary).filter(Diary.user_id == other.id).count() == 1

    def test_stale_token_after_withdraw(self, client, make_user):
        _, token = make_user("gone@example.com")
        use_token(client, token)
        client.delete("/api/user")

        # The token still verifies, but its user no longer exists
        use_token(client, token)
        response = client.get("/api/user/profile")
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}
        assert client.get("/api/user/preferences").status_code == 404
        assert client.delete("/api/user").status_code == 404
