"""API tests for school terms."""
from datetime import date

import pytest

from schoolhub.models import AcademicTerm
from schoolhub.schemas.enums import Term, TermStatus

pytestmark = pytest.mark.integration

TERM = {"session": "2024/2025", "term": "First", "start": "2024-09-09", "end": "2024-12-13"}


async def _term(seed, school, term=Term.FIRST, status=TermStatus.ACTIVE, **values):
    values.setdefault("session", "2024/2025")
    values.setdefault("start", date(2024, 9, 9))
    values.setdefault("end", date(2024, 12, 13))
    values.setdefault("days_open", 60)
    return await seed.add(AcademicTerm(school_id=school.id, term=term, status=status, **values))


class TestCreateTerm:
    """Creating terms and keeping one active term per school."""

    async def test_create_computes_days_open(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)

        response = await client.post("/api/terms", json=TERM, headers=auth(admin))

        assert response.status_code == 201
        body = response.json()
        assert body["school_id"] == school.id
        assert body["status"] == "Active"
        assert body["days_open"] == (date(2024, 12, 13) - date(2024, 9, 9)).days

    async def test_new_active_term_deactivates_previous(self, client, seed, auth):
        school, other = await seed.school(), await seed.school()
        admin = await seed.admin(school)
        previous = await _term(seed, school)
        elsewhere = await _term(seed, other)

        response = await client.post(
            "/api/terms",
            json={**TERM, "term": "Second", "start": "2025-01-06", "end": "2025-04-04"},
            headers=auth(admin)
        )

        assert response.status_code == 201
        assert (await seed.fetch(AcademicTerm, previous.id)).status is TermStatus.INACTIVE
        assert (await seed.fetch(AcademicTerm, elsewhere.id)).status is TermStatus.ACTIVE

    async def test_inactive_term_leaves_active_one(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        active = await _term(seed, school)

        response = await client.post("/api/terms", json={**TERM, "status": "Inactive"}, headers=auth(admin))

        assert response.status_code == 201
        assert (await seed.fetch(AcademicTerm, active.id)).status is TermStatus.ACTIVE

    async def test_end_before_start_is_rejected(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)

        response = await client.post(
            "/api/terms", json={**TERM, "end": "2024-09-01"}, headers=auth(admin)
        )

        assert response.status_code == 400
        assert await seed.count(AcademicTerm) == 0

    async def test_teacher_cannot_create_terms(self, client, seed, auth):
        school = await seed.school()
        teacher = await seed.teacher(school)

        response = await client.post("/api/terms", json=TERM, headers=auth(teacher))

        assert response.status_code == 403


class TestReadTerms:
    """Listing terms and the current term."""

    async def test_admin_sees_own_school_only(self, client, seed, auth):
        school, other = await seed.school(), await seed.school()
        admin = await seed.admin(school)
        mine = await _term(seed, school)
        await _term(seed, other)

        response = await client.get("/api/terms", headers=auth(admin))

        assert response.json()["total"] == 1
        assert response.json()["data"][0]["id"] == mine.id

    async def test_active_term_is_listed_first(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        active = await _term(seed, school)
        await _term(seed, school, term=Term.SECOND, status=TermStatus.INACTIVE)

        response = await client.get("/api/terms", headers=auth(admin))

        assert response.json()["data"][0]["id"] == active.id

    async def test_student_reads_current_term(self, client, seed, auth):
        school = await seed.school()
        parent = await seed.parent(school)
        student = await seed.student(school, await seed.klass(school), parent)
        await _term(seed, school, status=TermStatus.INACTIVE)
        active = await _term(seed, school, term=Term.SECOND)

        response = await client.get("/api/terms/current", headers=auth(student))

        assert response.status_code == 200
        assert response.json()["id"] == active.id

    async def test_current_term_missing(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        await _term(seed, school, status=TermStatus.INACTIVE)

        response = await client.get("/api/terms/current", headers=auth(admin))

        assert response.status_code == 404
        assert response.json()["error"] == "No active term found"


class TestChangeTerms:
    """Activating and deleting terms."""

    async def test_activating_a_term_deactivates_the_rest(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        active = await _term(seed, school)
        later = await _term(seed, school, term=Term.SECOND, status=TermStatus.INACTIVE)

        response = await client.put(
            f"/api/terms/{later.id}", json={"status": "Active"}, headers=auth(admin)
        )

        assert response.status_code == 200
        assert response.json()["status"] == "Active"
        assert (await seed.fetch(AcademicTerm, active.id)).status is TermStatus.INACTIVE

    async def test_update_checks_dates_against_stored_values(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        term = await _term(seed, school)

        response = await client.put(
            f"/api/terms/{term.id}", json={"end": "2024-09-01"}, headers=auth(admin)
        )

        assert response.status_code == 400

    async def test_deleting_active_term_reactivates_newest(self, client, seed, auth):
        school = await seed.school()
        admin = await seed.admin(school)
        await _term(seed, school, status=TermStatus.INACTIVE)
        newest = await _term(seed, school, term=Term.SECOND, status=TermStatus.INACTIVE)
        active = await _term(seed, school, term=Term.THIRD)

        response = await client.delete(f"/api/terms/{active.id}", headers=auth(admin))

        assert response.status_code == 200
        assert await seed.fetch(AcademicTerm, active.id) is None
        assert (await seed.fetch(AcademicTerm, newest.id)).status is TermStatus.ACTIVE
