"""API tests for teachers and parents."""
import pytest

from schoolhub.models import Parent, Subject, Teacher

pytestmark = pytest.mark.integration


class TestTeachers:
    """Teacher accounts."""

    async def test_create_assigns_subjects(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        maths = await seed.subject(school, name="Mathematics")

        response = await client.post(
            "/api/teachers",
            json={"firstname": "Ngozi", "surname": "Ike", "email": "ngozi@example.com", "subject_ids": [maths.id]},
            headers=auth(admin)
        )

        assert response.status_code == 201
        teacher_id = response.json()["id"]
        assert (await seed.fetch(Subject, maths.id)).teacher_id == teacher_id

    async def test_unknown_subject_is_rejected(self, client, seed, auth):
        school, other = await seed.school(), await seed.school()
        admin = await seed.admin(school)
        foreign = await seed.subject(other)

        response = await client.post(
            "/api/teachers",
            json={"firstname": "A", "surname": "B", "email": "ab@example.com", "subject_ids": [foreign.id]},
            headers=auth(admin)
        )

        assert response.status_code == 400
        assert await seed.count(Teacher, Teacher.email == "ab@example.com") == 0

    async def test_duplicate_email_conflicts(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        await seed.teacher(school, email="dup@example.com")

        response = await client.post(
            "/api/teachers",
            json={"firstname": "A", "surname": "B", "email": "DUP@example.com"},
            headers=auth(admin)
        )

        assert response.status_code == 409

    async def test_teacher_sees_only_self(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)
        await seed.teacher(school)

        response = await client.get("/api/teachers", headers=auth(teacher))

        assert [t["id"] for t in response.json()["data"]] == [teacher.id]

    async def test_teacher_updates_own_profile(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)
        colleague = await seed.teacher(school)

        own = await client.put(f"/api/teachers/{teacher.id}", json={"phone": "0803"}, headers=auth(teacher))
        other = await client.put(f"/api/teachers/{colleague.id}", json={"phone": "0804"}, headers=auth(teacher))

        assert own.status_code == 200
        assert own.json()["phone"] == "0803"
        assert other.status_code == 404

    async def test_teacher_with_lessons_is_blocked(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        teacher = await seed.teacher(school, firstname="Musa", surname="Ali")
        klass = await seed.klass(school)
        subject = await seed.subject(school, name="Physics")
        await seed.lesson(school, klass, subject, teacher)

        response = await client.delete(f"/api/teachers/{teacher.id}", headers=auth(admin))

        assert response.status_code == 400
        blocked = response.json()["blocked"][0]
        assert blocked["id"] == teacher.id
        assert blocked["name"] == "Musa Ali"
        assert blocked["relationships"] == {"lessons": ["Physics"]}

    async def test_unassigned_teacher_is_deleted(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        teacher = await seed.teacher(school)

        response = await client.delete(f"/api/teachers/{teacher.id}", headers=auth(admin))

        assert response.status_code == 200
        assert response.json()["deleted"] == 1
        assert await seed.fetch(Teacher, teacher.id) is None


class TestParents:
    """Parent accounts."""

    async def test_parent_with_children_is_blocked(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        parent = await seed.parent(school)
        klass = await seed.klass(school)
        await seed.student(school, klass, parent)

        response = await client.delete(f"/api/parents/{parent.id}", headers=auth(admin))

        assert response.status_code == 400
        assert response.json()["error"] == "Cannot delete parent(s) with registered children"
        assert response.json()["blocked"][0]["students"] == 1

    async def test_teacher_sees_parents_of_form_class(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)
        klass = await seed.klass(school, form_master=teacher)
        linked = await seed.parent(school)
        await seed.parent(school)
        await seed.student(school, klass, linked)

        response = await client.get("/api/parents", headers=auth(teacher))

        assert [p["id"] for p in response.json()["data"]] == [linked.id]

    async def test_create_duplicate_email_conflicts(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        await seed.parent(school, email="mum@example.com")

        response = await client.post(
            "/api/parents",
            json={"firstname": "M", "surname": "N", "email": "mum@example.com"},
            headers=auth(admin)
        )

        assert response.status_code == 409
        assert await seed.count(Parent) == 1
