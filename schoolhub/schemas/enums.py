from enum import Enum
from typing import Literal


class Role(str, Enum):
    """Session roles, ordered from unrestricted to most restricted."""
    SUPER = "super"
    MANAGEMENT = "management"
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"

    @property
    def is_administrative(self) -> bool:
        return self in (Role.SUPER, Role.MANAGEMENT, Role.ADMIN)


class AdminRole(str, Enum):
    """Role column of an administration record."""
    SUPER = "Super"
    ADMIN = "Admin"
    MANAGEMENT = "Management"

    def to_role(self) -> Role:
        return Role(self.value.lower())


# Stored in plain string columns
GenderValue = Literal["Male", "Female"]


class Weekday(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"


class Term(str, Enum):
    FIRST = "First"
    SECOND = "Second"
    THIRD = "Third"


class GalleryCategory(str, Enum):
    CAROUSEL = "CAROUSEL"
    LOGO = "LOGO"
    FACILITIES = "FACILITIES"
    EVENTS = "EVENTS"
    STUDENTS = "STUDENTS"
    TEACHERS = "TEACHERS"
    ACHIEVEMENTS = "ACHIEVEMENTS"
    GENERAL = "GENERAL"


class TermStatus(str, Enum):
    """At most one term per school is active."""
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class NewsCategory(str, Enum):
    ACHIEVEMENT = "ACHIEVEMENT"
    SPORTS = "SPORTS"
    FACILITIES = "FACILITIES"
    ARTS = "ARTS"
    EDUCATION = "EDUCATION"
    COMMUNITY = "COMMUNITY"
    GENERAL = "GENERAL"


class NewsStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"
