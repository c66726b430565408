"""API tests for login, session introspection and password changes."""
import pytest

from schoolhub.core.config import settings
from schoolhub.schemas.enums import AdminRole

pytestmark = pytest.mark.integration

# password of every seeded account
PASSWORD = "password123"


class TestLogin:
    """Password login across account types."""

    async def test_admin_logs_in_with_username(self, client, seed):
        school = await seed.school()
        admin = await seed.admin(school, username="bursar")

        response = await client.post("/api/auth/login", json={"username": "bursar", "password": PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["user"] == {
            "id": admin.id, "role": "admin", "name": "bursar", "school_id": school.id, "school_ids": [school.id],
        }
        assert settings.COOKIE_NAME in response.cookies

    async def test_student_logs_in_with_admission_number(self, client, seed):
        school = await seed.school()
        parent = await seed.parent(school)
        student = await seed.student(school, await seed.klass(school), parent, admission_number="HALL/2024/00001")

        response = await client.post(
            "/api/auth/login", json={"username": "HALL/2024/00001", "password": PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["id"] == student.id
        assert response.json()["user"]["role"] == "student"

    async def test_wrong_password_is_unauthorized(self, client, seed):
        await seed.teacher(await seed.school(), email="t@example.com")

        response = await client.post("/api/auth/login", json={"username": "t@example.com", "password": "nope"})

        assert response.status_code == 401

    async def test_inactive_account_is_forbidden(self, client, seed):
        await seed.parent(await seed.school(), email="p@example.com", active=False)

        response = await client.post("/api/auth/login", json={"username": "p@example.com", "password": PASSWORD})

        assert response.status_code == 403
        assert response.json()["error"] == "Account is inactive"

    async def test_cookie_authenticates_later_requests(self, client, seed):
        await seed.admin(role=AdminRole.SUPER, username="root")
        login = await client.post("/api/auth/login", json={"username": "root", "password": PASSWORD})
        assert login.status_code == 200

        response = await client.get("/api/auth/me")

        assert response.status_code == 200
        assert response.json()["role"] == "super"


class TestSession:
    """The resolved caller context."""

    async def test_me_describes_teacher_classes(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)
        klass = await seed.klass(school, form_master=teacher)

        response = await client.get("/api/auth/me", headers=auth(teacher))

        body = response.json()
        assert body["role"] == "teacher"
        assert body["school_id"] == school.id
        assert body["class_ids"] == [klass.id]

    async def test_deactivated_account_loses_access(self, client, seed, auth):
        admin = await seed.admin(await seed.school(), active=False)

        response = await client.get("/api/auth/me", headers=auth(admin))

        assert response.status_code == 401

    async def test_garbage_token_is_unauthorized(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestChangePassword:
    """Changing one's own password."""

    async def test_change_then_login_with_new_password(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school, email="change@example.com")

        response = await client.post(
            "/api/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "brand-new-pass"},
            headers=auth(teacher)
        )
        assert response.status_code == 200

        old = await client.post("/api/auth/login", json={"username": "change@example.com", "password": PASSWORD})
        new = await client.post(
            "/api/auth/login", json={"username": "change@example.com", "password": "brand-new-pass"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_wrong_current_password_is_rejected(self, client, seed, auth):
        admin = await seed.admin(await seed.school())

        response = await client.post(
            "/api/auth/change-password",
            json={"current_password": "incorrect", "new_password": "brand-new-pass"},
            headers=auth(admin)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Current password is incorrect"


async def test_logout_clears_cookie(client):
    response = await client.post("/api/auth/logout")
    assert response.status_code == 200
    assert settings.COOKIE_NAME in response.headers.get("set-cookie", "")
