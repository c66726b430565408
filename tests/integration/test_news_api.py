"""API tests for news posts."""
import pytest

from schoolhub.models import NewsPost
from schoolhub.schemas.enums import AdminRole, NewsCategory, NewsStatus

pytestmark = pytest.mark.integration

POST = {"title": "Science fair winners", "content": "Our team placed first.", "author": "Head of Science"}


async def _post(seed, school=None, status=NewsStatus.PUBLISHED, **values):
    values.setdefault("title", "Post")
    values.setdefault("content", "Body")
    values.setdefault("author", "Office")
    values.setdefault("category", NewsCategory.GENERAL)
    return await seed.add(NewsPost(school_id=school.id if school else None, status=status, **values))


class TestCreateNews:
    """Writing news posts."""

    async def test_admin_creates_draft(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)

        response = await client.post("/api/news", json=POST, headers=auth(admin))

        assert response.status_code == 201
        body = response.json()
        assert body["school_id"] == school.id
        assert body["status"] == NewsStatus.DRAFT.value
        assert body["published_at"] is None

    async def test_publishing_sets_published_at(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        draft = await _post(seed, school, status=NewsStatus.DRAFT)

        response = await client.put(
            f"/api/news/{draft.id}", json={"status": NewsStatus.PUBLISHED.value}, headers=auth(admin)
        )

        assert response.status_code == 200
        assert response.json()["published_at"] is not None

    async def test_super_posts_to_every_school(self, client, seed, auth):
        root = await seed.admin(role=AdminRole.SUPER)

        response = await client.post(
            "/api/news", json={**POST, "status": NewsStatus.PUBLISHED.value}, headers=auth(root)
        )

        assert response.status_code == 201
        assert response.json()["school_id"] is None
        assert response.json()["published_at"] is not None

    async def test_teacher_cannot_create(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)

        response = await client.post("/api/news", json=POST, headers=auth(teacher))

        assert response.status_code == 403
        assert await seed.count(NewsPost) == 0


class TestReadNews:
    """Drafts stay with staff."""

    async def test_student_sees_published_own_and_global(self, client, seed, auth):
        school, other = await seed.school(), await seed.school()
        parent = await seed.parent(school)
        student = await seed.student(school, await seed.klass(school), parent)
        visible = [await _post(seed, school), await _post(seed)]
        await _post(seed, school, status=NewsStatus.DRAFT)
        await _post(seed, school, status=NewsStatus.ARCHIVED)
        await _post(seed, other)

        response = await client.get("/api/news", headers=auth(student))

        assert {p["id"] for p in response.json()["data"]} == {p.id for p in visible}

    async def test_admin_filters_by_status(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        draft = await _post(seed, school, status=NewsStatus.DRAFT)
        await _post(seed, school)

        response = await client.get(
            "/api/news", params={"status": NewsStatus.DRAFT.value}, headers=auth(admin)
        )

        assert [p["id"] for p in response.json()["data"]] == [draft.id]

    async def test_search_and_featured_filter(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        featured = await _post(seed, school, title="Debate champions", featured=True)
        await _post(seed, school, title="Debate practice")

        response = await client.get(
            "/api/news", params={"search": "debate", "featured": "true"}, headers=auth(admin)
        )

        assert [p["id"] for p in response.json()["data"]] == [featured.id]
