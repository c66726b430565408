"""API tests for daily attendance."""
from datetime import date

import pytest

from schoolhub.models import Attendance

pytestmark = pytest.mark.integration


async def _roster(seed):
    school = await seed.school()
    teacher = await seed.teacher(school)
    form_class = await seed.klass(school, form_master=teacher)
    other_class = await seed.klass(school)
    parent = await seed.parent(school)
    mine = await seed.student(school, form_class, parent)
    theirs = await seed.student(school, other_class, await seed.parent(school))
    return school, teacher, parent, mine, theirs


async def _mark(seed, student, day: int, present: bool = True):
    return await seed.add(Attendance(
        school_id=student.school_id, student_id=student.id, date=date(2025, 2, day), present=present
    ))


class TestMarkAttendance:
    """Recording a student's presence for a day."""

    async def test_teacher_marks_form_class_student(self, client, seed, auth):
        school, teacher, _, mine, _ = await _roster(seed)

        response = await client.post(
            "/api/attendance",
            json={"student_id": mine.id, "date": "2025-02-03", "present": True},
            headers=auth(teacher)
        )

        assert response.status_code == 201
        body = response.json()
        assert body["school_id"] == school.id
        assert body["student"]["id"] == mine.id

    async def test_marking_again_updates_the_day(self, client, seed, auth):
        _, teacher, _, mine, _ = await _roster(seed)
        record = await _mark(seed, mine, 3, present=True)

        response = await client.post(
            "/api/attendance",
            json={"student_id": mine.id, "date": "2025-02-03", "present": False},
            headers=auth(teacher)
        )

        assert response.status_code == 200
        assert response.json()["id"] == record.id
        assert response.json()["present"] is False
        assert await seed.count(Attendance) == 1

    async def test_teacher_cannot_mark_other_class(self, client, seed, auth):
        _, teacher, _, _, theirs = await _roster(seed)

        response = await client.post(
            "/api/attendance",
            json={"student_id": theirs.id, "date": "2025-02-03", "present": True},
            headers=auth(teacher)
        )

        assert response.status_code == 403
        assert await seed.count(Attendance) == 0

    async def test_admin_cannot_mark_other_school(self, client, seed, auth):
        _, _, _, mine, _ = await _roster(seed)
        admin = await seed.admin(await seed.school())

        response = await client.post(
            "/api/attendance",
            json={"student_id": mine.id, "date": "2025-02-03", "present": True},
            headers=auth(admin)
        )

        assert response.status_code == 403

    async def test_unknown_student_is_rejected(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)

        response = await client.post(
            "/api/attendance",
            json={"student_id": 999, "date": "2025-02-03", "present": True},
            headers=auth(admin)
        )

        assert response.status_code == 400

    async def test_student_cannot_mark(self, client, seed, auth):
        _, _, _, mine, _ = await _roster(seed)

        response = await client.post(
            "/api/attendance",
            json={"student_id": mine.id, "date": "2025-02-03", "present": True},
            headers=auth(mine)
        )

        assert response.status_code == 403


class TestReadAttendance:
    """Who sees which records."""

    async def test_parent_sees_own_children(self, client, seed, auth):
        _, _, parent, mine, theirs = await _roster(seed)
        visible = await _mark(seed, mine, 3)
        await _mark(seed, theirs, 3)

        response = await client.get("/api/attendance", headers=auth(parent))

        assert [r["id"] for r in response.json()["data"]] == [visible.id]

    async def test_teacher_sees_form_class(self, client, seed, auth):
        _, teacher, _, mine, theirs = await _roster(seed)
        visible = await _mark(seed, mine, 3)
        await _mark(seed, theirs, 3)

        response = await client.get("/api/attendance", headers=auth(teacher))

        assert [r["id"] for r in response.json()["data"]] == [visible.id]

    async def test_date_range_filter(self, client, seed, auth):
        school, _, _, mine, _ = await _roster(seed)
        admin = await seed.admin(school)
        inside = await _mark(seed, mine, 5)
        await _mark(seed, mine, 20)

        response = await client.get(
            "/api/attendance", params={"from": "2025-02-01", "to": "2025-02-10"}, headers=auth(admin)
        )

        assert [r["id"] for r in response.json()["data"]] == [inside.id]

    async def test_class_filter(self, client, seed, auth):
        school, _, _, mine, theirs = await _roster(seed)
        admin = await seed.admin(school)
        await _mark(seed, mine, 3)
        other = await _mark(seed, theirs, 3)

        response = await client.get(
            "/api/attendance", params={"class_id": theirs.class_id}, headers=auth(admin)
        )

        assert [r["id"] for r in response.json()["data"]] == [other.id]


class TestDeleteAttendance:
    """Only staff delete records."""

    async def test_teacher_cannot_delete(self, client, seed, auth):
        _, teacher, _, mine, _ = await _roster(seed)
        record = await _mark(seed, mine, 3)

        response = await client.delete(f"/api/attendance/{record.id}", headers=auth(teacher))

        assert response.status_code == 403
        assert await seed.count(Attendance) == 1

    async def test_admin_deletes(self, client, seed, auth):
        school, _, _, mine, _ = await _roster(seed)
        admin = await seed.admin(school)
        record = await _mark(seed, mine, 3)

        response = await client.delete(f"/api/attendance/{record.id}", headers=auth(admin))

        assert response.status_code == 200
        assert response.json()["deleted"] == 1
        assert await seed.count(Attendance) == 0
