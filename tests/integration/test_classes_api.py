"""API tests for classes."""
import pytest

from schoolhub.models import Class, Lesson
from schoolhub.schemas.enums import AdminRole

pytestmark = pytest.mark.integration


class TestCreateClass:
    """Creating classes."""

    async def test_management_without_school_is_denied(self, client, seed, auth):
        orphan = await seed.admin(role=AdminRole.MANAGEMENT)

        response = await client.post(
            "/api/classes", json={"name": "JSS 1", "category": "A"}, headers=auth(orphan)
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Access denied - no school association found"}

    async def test_created_in_callers_school(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)

        response = await client.post(
            "/api/classes",
            json={"name": "JSS 1", "category": "A", "capacity": 30},
            headers=auth(admin)
        )

        assert response.status_code == 201
        body = response.json()
        assert body["school_id"] == school.id
        assert body["student_count"] == 0

    async def test_super_must_name_school(self, client, seed, auth):
        root = await seed.admin(role=AdminRole.SUPER)

        response = await client.post(
            "/api/classes", json={"name": "JSS 1", "category": "A"}, headers=auth(root)
        )

        assert response.status_code == 400

    async def test_super_accepts_school_id_alias(self, client, seed, auth):
        school = await seed.school()
        root = await seed.admin(role=AdminRole.SUPER)

        response = await client.post(
            "/api/classes",
            json={"name": "SS 2", "category": "B", "schoolId": school.id},
            headers=auth(root)
        )

        assert response.status_code == 201
        assert response.json()["school_id"] == school.id

    async def test_duplicate_name_and_category_conflicts(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        await seed.klass(school, name="JSS 1", category="A")

        response = await client.post(
            "/api/classes", json={"name": "jss 1", "category": "a"}, headers=auth(admin)
        )

        assert response.status_code == 409

    async def test_form_master_from_another_school_is_rejected(self, client, seed, auth):
        school, other = await seed.school(), await seed.school()
        admin = await seed.admin(school)
        outsider = await seed.teacher(other)

        response = await client.post(
            "/api/classes",
            json={"name": "JSS 2", "category": "A", "form_master_id": outsider.id},
            headers=auth(admin)
        )

        assert response.status_code == 400

    async def test_teacher_cannot_create(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)

        response = await client.post(
            "/api/classes", json={"name": "JSS 3", "category": "A"}, headers=auth(teacher)
        )

        assert response.status_code == 403


class TestReadClasses:
    """Listing and class detail."""

    async def test_list_reports_student_counts(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        parent = await seed.parent(school)
        full = await seed.klass(school)
        await seed.klass(school)
        await seed.student(school, full, parent)
        await seed.student(school, full, parent)

        response = await client.get("/api/classes", headers=auth(admin))

        counts = {c["id"]: c["student_count"] for c in response.json()["data"]}
        assert counts[full.id] == 2
        assert sorted(counts.values()) == [0, 2]

    async def test_teacher_sees_form_and_lesson_classes(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)
        form_class = await seed.klass(school, form_master=teacher)
        lesson_class = await seed.klass(school)
        await seed.klass(school)
        subject = await seed.subject(school, teacher)
        await seed.lesson(school, lesson_class, subject, teacher)

        response = await client.get("/api/classes", headers=auth(teacher))

        assert {c["id"] for c in response.json()["data"]} == {form_class.id, lesson_class.id}

    async def test_detail_lists_students_and_form_master(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        teacher = await seed.teacher(school)
        parent = await seed.parent(school)
        klass = await seed.klass(school, form_master=teacher)
        student = await seed.student(school, klass, parent)

        response = await client.get(f"/api/classes/{klass.id}", headers=auth(admin))

        body = response.json()
        assert response.status_code == 200
        assert body["form_master"]["id"] == teacher.id
        assert [s["id"] for s in body["students"]] == [student.id]
        assert body["student_count"] == 1

    async def test_class_of_another_school_is_not_found(self, client, seed, auth):
        school, other = await seed.school(), await seed.school()
        admin = await seed.admin(school)
        foreign = await seed.klass(other)

        response = await client.get(f"/api/classes/{foreign.id}", headers=auth(admin))

        assert response.status_code == 404


class TestDeleteClasses:
    """Classes with enrolled students cannot be deleted."""

    async def test_class_with_students_is_blocked(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        parent = await seed.parent(school)
        klass = await seed.klass(school, name="JSS 1", category="A")
        await seed.student(school, klass, parent)
        await seed.student(school, klass, parent)

        response = await client.delete(f"/api/classes/{klass.id}", headers=auth(admin))

        assert response.status_code == 400
        blocked = response.json()["blocked"]
        assert blocked == [{
            "id": klass.id,
            "name": "JSS 1 A",
            "reason": "Class has enrolled students",
            "students": 2,
        }]
        assert await seed.fetch(Class, klass.id) is not None

    async def test_partial_delete_reports_blocked_classes(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        parent = await seed.parent(school)
        busy = await seed.klass(school)
        empty = await seed.klass(school)
        await seed.student(school, busy, parent)

        response = await client.delete(
            "/api/classes", params=[("ids", busy.id), ("ids", empty.id)], headers=auth(admin)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["deleted"] == 1
        assert [b["id"] for b in body["blocked"]] == [busy.id]

    async def test_empty_class_delete_cascades_lessons(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        teacher = await seed.teacher(school)
        klass = await seed.klass(school)
        subject = await seed.subject(school, teacher)
        await seed.lesson(school, klass, subject, teacher)

        response = await client.delete(f"/api/classes/{klass.id}", headers=auth(admin))

        assert response.status_code == 200
        assert response.json()["cascaded"]["lessons"] == 1
        assert await seed.count(Lesson, Lesson.class_id == klass.id) == 0
