"""API tests for students, including admission numbers and teacher scoping."""
from datetime import date

import pytest

from schoolhub.models import Student
from schoolhub.schemas.enums import AdminRole

pytestmark = pytest.mark.integration


async def school_with_class(seed, **school_values):
    school = await seed.school(**school_values)
    parent = await seed.parent(school)
    return school, parent, await seed.klass(school)


class TestCreateStudent:
    """Creating students issues admission numbers."""

    async def test_admission_number_uses_school_prefix(self, client, seed, auth):
        school, parent, klass = await school_with_class(seed, reg_number_prepend="HALL")
        admin = await seed.admin(school)
        year = date.today().year

        response = await client.post(
            "/api/students",
            json={"firstname": "Ada", "surname": "Obi", "class_id": klass.id, "parent_id": parent.id},
            headers=auth(admin)
        )

        assert response.status_code == 201
        body = response.json()
        assert body["admission_number"] == f"HALL/{year}/00001"
        assert "password_hash" not in body

    async def test_sequence_continues_from_existing_numbers(self, client, seed, auth):
        school, parent, klass = await school_with_class(seed, reg_number_prepend="HALL")
        admin = await seed.admin(school)
        year = date.today().year
        await seed.student(school, klass, parent, admission_number=f"HALL/{year}/00001")
        await seed.student(school, klass, parent, admission_number=f"HALL/{year}/00003")

        numbers = []
        for name in ("Bola", "Chidi"):
            response = await client.post(
                "/api/students",
                json={"firstname": name, "surname": "Eze", "class_id": klass.id, "parent_id": parent.id},
                headers=auth(admin)
            )
            assert response.status_code == 201
            numbers.append(response.json()["admission_number"])

        assert numbers == [f"HALL/{year}/00004", f"HALL/{year}/00005"]

    async def test_full_class_is_rejected(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        parent = await seed.parent(school)
        klass = await seed.klass(school, capacity=1)
        await seed.student(school, klass, parent)

        response = await client.post(
            "/api/students",
            json={"firstname": "Late", "surname": "Comer", "class_id": klass.id, "parent_id": parent.id},
            headers=auth(admin)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Class capacity reached"

    async def test_parent_from_another_school_is_rejected(self, client, seed, auth):
        school, _, klass = await school_with_class(seed)
        other = await seed.school()
        stranger = await seed.parent(other)
        admin = await seed.admin(school)

        response = await client.post(
            "/api/students",
            json={"firstname": "A", "surname": "B", "class_id": klass.id, "parent_id": stranger.id},
            headers=auth(admin)
        )

        assert response.status_code == 400

    async def test_teacher_adds_only_to_form_class(self, client, seed, auth):
        school = await seed.school()
        parent = await seed.parent(school)
        teacher = await seed.teacher(school)
        own = await seed.klass(school, form_master=teacher)
        other = await seed.klass(school)
        payload = {"firstname": "T", "surname": "S", "parent_id": parent.id}

        allowed = await client.post(
            "/api/students", json={**payload, "class_id": own.id}, headers=auth(teacher)
        )
        denied = await client.post(
            "/api/students", json={**payload, "class_id": other.id}, headers=auth(teacher)
        )

        assert allowed.status_code == 201
        assert denied.status_code == 403

    async def test_parent_cannot_create(self, client, seed, auth):
        school, parent, klass = await school_with_class(seed)

        response = await client.post(
            "/api/students",
            json={"firstname": "A", "surname": "B", "class_id": klass.id, "parent_id": parent.id},
            headers=auth(parent)
        )

        assert response.status_code == 403


class TestReadStudents:
    """Visibility of student records."""

    async def test_teacher_sees_form_class_roster_only(self, client, seed, auth):
        school = await seed.school()
        parent = await seed.parent(school)
        teacher = await seed.teacher(school)
        own = await seed.klass(school, form_master=teacher)
        other = await seed.klass(school)
        mine = await seed.student(school, own, parent)
        await seed.student(school, other, parent)

        response = await client.get("/api/students", headers=auth(teacher))

        assert [s["id"] for s in response.json()["data"]] == [mine.id]
        assert response.json()["total"] == 1

    async def test_parent_sees_own_children(self, client, seed, auth):
        school = await seed.school()
        parent = await seed.parent(school)
        other_parent = await seed.parent(school)
        klass = await seed.klass(school)
        child = await seed.student(school, klass, parent)
        await seed.student(school, klass, other_parent)

        response = await client.get("/api/students", headers=auth(parent))

        assert [s["id"] for s in response.json()["data"]] == [child.id]

    async def test_student_sees_only_self(self, client, seed, auth):
        school, parent, klass = await school_with_class(seed)
        me = await seed.student(school, klass, parent)
        classmate = await seed.student(school, klass, parent)

        own = await client.get(f"/api/students/{me.id}", headers=auth(me))
        other = await client.get(f"/api/students/{classmate.id}", headers=auth(me))

        assert own.status_code == 200
        assert other.status_code == 404

    async def test_search_and_pagination(self, client, seed, auth):
        school, parent, klass = await school_with_class(seed)
        admin = await seed.admin(school)
        for name in ("Amaka", "Amadi", "Bayo"):
            await seed.student(school, klass, parent, firstname=name)

        response = await client.get(
            "/api/students", params={"search": "ama", "page": 1, "limit": 1}, headers=auth(admin)
        )

        body = response.json()
        assert body["total"] == 2
        assert len(body["data"]) == 1


class TestDeleteStudents:
    """Deleting students."""

    async def test_teacher_cannot_delete_outside_form_class(self, client, seed, auth):
        school = await seed.school()
        parent = await seed.parent(school)
        teacher = await seed.teacher(school)
        await seed.klass(school, form_master=teacher)
        other = await seed.klass(school)
        outsider = await seed.student(school, other, parent)

        response = await client.delete(f"/api/students/{outsider.id}", headers=auth(teacher))

        assert response.status_code == 404
        assert await seed.fetch(Student, outsider.id) is not None

    async def test_admin_delete_reports_cascade(self, client, seed, auth):
        school, parent, klass = await school_with_class(seed)
        admin = await seed.admin(school, role=AdminRole.MANAGEMENT)
        student = await seed.student(school, klass, parent)

        response = await client.delete(
            "/api/students", params={"ids": str(student.id)}, headers=auth(admin)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["deleted"] == 1
        assert body["cascaded"] == {"student_grades": 0, "report_cards": 0, "attendance": 0}
