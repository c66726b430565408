"""API tests for dashboard statistics."""
from datetime import date, datetime, timedelta

import pytest

from schoolhub.models import AcademicTerm, Announcement, Attendance, Event
from schoolhub.schemas.enums import AdminRole, Term, TermStatus

pytestmark = pytest.mark.integration


class TestStats:
    """Every figure follows what the caller may read."""

    async def test_admin_counts_own_school(self, client, seed, auth):
        school, other = await seed.school(), await seed.school()
        admin = await seed.admin(school)
        klass = await seed.klass(school)
        await seed.student(school, klass, await seed.parent(school), gender="Female")
        await seed.student(school, klass, await seed.parent(school), gender="Male")
        await seed.student(other, await seed.klass(other), await seed.parent(other))

        response = await client.get("/api/stats", headers=auth(admin))

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "admin"
        assert body["counts"]["schools"] == 1
        assert body["counts"]["students"] == 2
        assert body["counts"]["parents"] == 2
        assert body["counts"]["classes"] == 1
        assert body["recent"]["students"] == 2
        assert {g["gender"]: g["count"] for g in body["students_by_gender"]} == {"Female": 1, "Male": 1}

    async def test_super_counts_everything(self, client, seed, auth):
        root = await seed.admin(role=AdminRole.SUPER)
        await seed.school()
        await seed.school()

        response = await client.get("/api/stats", headers=auth(root))

        assert response.json()["counts"]["schools"] == 2

    async def test_teacher_counts_own_subjects_and_lessons(self, client, seed, auth):
        school = await seed.school()
        teacher, colleague = await seed.teacher(school), await seed.teacher(school)
        klass = await seed.klass(school)
        mine = await seed.subject(school, teacher)
        theirs = await seed.subject(school, colleague)
        await seed.lesson(school, klass, mine, teacher)
        await seed.lesson(school, klass, theirs, colleague)

        response = await client.get("/api/stats", headers=auth(teacher))

        counts = response.json()["counts"]
        assert counts["subjects"] == 1
        assert counts["lessons"] == 1
        assert counts["teachers"] == 1
        assert counts["administrations"] == 0

    async def test_admin_without_school_is_forbidden(self, client, seed, auth):
        admin = await seed.admin()

        response = await client.get("/api/stats", headers=auth(admin))

        assert response.status_code == 403
        assert response.json()["error"] == (
            "No school associated with user. Cannot fetch school-specific statistics."
        )

    async def test_current_term_and_recent_activity(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        term = await seed.add(AcademicTerm(
            school_id=school.id, session="2024/2025", term=Term.FIRST, start=date(2024, 9, 9),
            end=date(2024, 12, 13), days_open=60, status=TermStatus.ACTIVE
        ))
        for day in range(1, 6):
            await seed.add(Announcement(
                title=f"Notice {day}", description="Body", date=datetime(2025, 1, day, 8, 0), school_id=school.id
            ))
        await seed.add(Event(
            title="Sports day", school_id=school.id,
            start_time=datetime(2025, 3, 1, 9, 0), end_time=datetime(2025, 3, 1, 15, 0)
        ))

        body = (await client.get("/api/stats", headers=auth(admin))).json()

        assert body["current_term"]["id"] == term.id
        assert [a["title"] for a in body["announcements"]] == ["Notice 5", "Notice 4", "Notice 3"]
        assert [e["title"] for e in body["events"]] == ["Sports day"]

    async def test_attendance_chart_covers_last_week(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        klass = await seed.klass(school)
        first = await seed.student(school, klass, await seed.parent(school))
        second = await seed.student(school, klass, await seed.parent(school))
        today = date.today()
        await seed.add(Attendance(school_id=school.id, student_id=first.id, date=today, present=True))
        await seed.add(Attendance(school_id=school.id, student_id=second.id, date=today, present=False))
        await seed.add(Attendance(
            school_id=school.id, student_id=first.id, date=today - timedelta(days=30), present=True
        ))

        chart = (await client.get("/api/stats", headers=auth(admin))).json()["attendance"]

        assert len(chart) == 7
        assert chart[-1] == {"date": today.isoformat(), "present": 1, "absent": 1}
        assert sum(day["present"] + day["absent"] for day in chart) == 2
