"""API tests for events and announcements."""
from datetime import datetime

import pytest

from schoolhub.models import Announcement, Event
from schoolhub.schemas.enums import AdminRole

pytestmark = pytest.mark.integration

EVENT = {"title": "Sports day", "start_time": "2025-03-01T09:00:00", "end_time": "2025-03-01T15:00:00"}


def _at(day: int) -> datetime:
    return datetime(2025, 1, day, 9, 0)


class TestEvents:
    """School, class and global events."""

    async def test_super_posts_global_event(self, client, seed, auth):
        root = await seed.admin(role=AdminRole.SUPER)

        response = await client.post("/api/events", json=EVENT, headers=auth(root))

        assert response.status_code == 201
        assert response.json()["school_id"] is None

    async def test_global_and_school_events_are_visible_to_students(self, client, seed, auth):
        school, other = await seed.school(), await seed.school()
        parent = await seed.parent(school)
        klass = await seed.klass(school)
        other_class = await seed.klass(school)
        student = await seed.student(school, klass, parent)
        visible = [
            await seed.add(Event(title="Global", start_time=_at(1), end_time=_at(2))),
            await seed.add(Event(title="School", school_id=school.id, start_time=_at(3), end_time=_at(4))),
            await seed.add(Event(
                title="Class", school_id=school.id, class_id=klass.id, start_time=_at(5), end_time=_at(6)
            )),
        ]
        await seed.add(Event(
            title="Other class", school_id=school.id, class_id=other_class.id, start_time=_at(7), end_time=_at(8)
        ))
        await seed.add(Event(title="Other school", school_id=other.id, start_time=_at(9), end_time=_at(10)))

        response = await client.get("/api/events", headers=auth(student))

        assert {e["id"] for e in response.json()["data"]} == {e.id for e in visible}

    async def test_end_before_start_is_rejected(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)

        response = await client.post(
            "/api/events",
            json={**EVENT, "end_time": "2025-03-01T08:00:00"},
            headers=auth(admin)
        )

        assert response.status_code == 400

    async def test_date_range_filter(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        inside = await seed.add(Event(title="In", school_id=school.id, start_time=_at(5), end_time=_at(6)))
        await seed.add(Event(title="Out", school_id=school.id, start_time=_at(20), end_time=_at(21)))

        response = await client.get(
            "/api/events",
            params={"from": _at(1).isoformat(), "to": _at(10).isoformat()},
            headers=auth(admin)
        )

        assert [e["id"] for e in response.json()["data"]] == [inside.id]


class TestTeacherPosts:
    """Teachers post only to classes they teach."""

    async def test_teacher_posts_to_form_class(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)
        klass = await seed.klass(school, form_master=teacher)

        response = await client.post(
            "/api/announcements",
            json={"title": "Homework", "description": "Page 12", "date": "2025-02-01T08:00:00", "class_id": klass.id},
            headers=auth(teacher)
        )

        assert response.status_code == 201
        assert response.json()["school_id"] == school.id

    async def test_teacher_cannot_post_to_other_class(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)
        other = await seed.klass(school)

        response = await client.post(
            "/api/announcements",
            json={"title": "Homework", "description": "Page 12", "date": "2025-02-01T08:00:00", "class_id": other.id},
            headers=auth(teacher)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "You can only post to your own classes"
        assert await seed.count(Announcement) == 0

    async def test_teacher_cannot_post_school_wide(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)
        await seed.klass(school, form_master=teacher)

        response = await client.post(
            "/api/announcements",
            json={"title": "Notice", "description": "All", "date": "2025-02-01T08:00:00"},
            headers=auth(teacher)
        )

        assert response.status_code == 403
