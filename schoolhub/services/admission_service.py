# schoolhub/services/admission_service.py
"""
Admission numbers have the form ``PREFIX/YEAR/NNNNN``.

Numbers are issued from a per-school, per-year counter row which is locked for the
duration of the student insert. A missing counter is seeded from the numbers already
issued, so schools that pre-date the counter table continue their sequence.
"""
import re
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.config import settings
from schoolhub.models import AdmissionCounter, School, Student
from schoolhub.services.base_service import LIKE_ESCAPE, escape_like

SEQUENCE_WIDTH = 5


def format_admission_number(prefix: str, year: int, sequence: int) -> str:
    return f"{prefix}/{year}/{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(admission_number: str, prefix: str, year: int) -> Optional[int]:
    # sequences past 99999 keep growing in width
    pattern = rf"^{re.escape(prefix)}/{year}/(\d{{{SEQUENCE_WIDTH},}})$"
    match = re.match(pattern, admission_number or "")
    return int(match.group(1)) if match else None


def highest_sequence(existing: Iterable[str], prefix: str, year: int) -> int:
    sequences = (parse_sequence(number, prefix, year) for number in existing)
    return max((s for s in sequences if s is not None), default=0)


def generate_admission_number(existing: Iterable[str], prefix: str, year: int) -> str:
    """Next number after the highest ``PREFIX/YEAR/NNNNN`` in ``existing``; starts at 1."""
    return format_admission_number(prefix, year, highest_sequence(existing, prefix, year) + 1)


def admission_prefix(school: School) -> str:
    return school.reg_number_prepend or settings.DEFAULT_ADMISSION_PREFIX


class AdmissionNumberAllocator:
    """Issues admission numbers inside the caller's open transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _seed(self, school_id: int, prefix: str, year: int) -> AdmissionCounter:
        result = await self.db.execute(
            select(Student.admission_number).where(
                Student.school_id == school_id,
                Student.admission_number.like(f"{escape_like(prefix)}/{year}/%", escape=LIKE_ESCAPE)
            )
        )
        counter = AdmissionCounter(
            school_id=school_id,
            year=year,
            value=highest_sequence(result.scalars().all(), prefix, year)
        )
        self.db.add(counter)
        return counter

    async def _taken(self, admission_number: str) -> bool:
        return await self.db.scalar(
            select(Student.id).where(Student.admission_number == admission_number).limit(1)
        ) is not None

    async def allocate(self, school_id: int, prefix: str, year: int) -> str:
        counter = await self.db.scalar(
            select(AdmissionCounter)
            .where(AdmissionCounter.school_id == school_id, AdmissionCounter.year == year)
            .with_for_update()
        )
        if counter is None:
            counter = await self._seed(school_id, prefix, year)

        counter.value += 1
        number = format_admission_number(prefix, year, counter.value)
        # another school may share the prefix
        while await self._taken(number):
            counter.value += 1
            number = format_admission_number(prefix, year, counter.value)

        await self.db.flush()
        return number
