# schoolhub/core/permissions.py
from enum import Enum
from typing import Dict, FrozenSet

from schoolhub.core.errors import PermissionDenied
from schoolhub.core.logging import logger
from schoolhub.schemas.enums import Role


class Resource(str, Enum):
    SCHOOLS = "schools"
    ADMINISTRATIONS = "administrations"
    TEACHERS = "teachers"
    STUDENTS = "students"
    PARENTS = "parents"
    CLASSES = "classes"
    SUBJECTS = "subjects"
    LESSONS = "lessons"
    GRADES = "grades"
    EVENTS = "events"
    ANNOUNCEMENTS = "announcements"
    GALLERY = "gallery"
    TERMS = "terms"
    ATTENDANCE = "attendance"
    NEWS = "news"


class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def is_write(self) -> bool:
        return self is not Action.READ


_STAFF = frozenset({Role.SUPER, Role.MANAGEMENT, Role.ADMIN})
_STAFF_AND_TEACHER = _STAFF | {Role.TEACHER}


def _same(roles: FrozenSet[Role]) -> Dict[Action, FrozenSet[Role]]:
    return {Action.CREATE: roles, Action.UPDATE: roles, Action.DELETE: roles}


# Roles allowed to perform each write action. Every role may attempt a read; what it
# actually sees is decided by the scope calculator.
WRITERS: Dict[Resource, Dict[Action, FrozenSet[Role]]] = {
    Resource.SCHOOLS: {
        # a new school must fall inside its creator's read scope
        Action.CREATE: frozenset({Role.SUPER}),
        Action.UPDATE: _STAFF,
        Action.DELETE: frozenset({Role.SUPER}),
    },
    Resource.ADMINISTRATIONS: {
        Action.CREATE: frozenset({Role.SUPER, Role.MANAGEMENT}),
        Action.UPDATE: _STAFF,
        Action.DELETE: frozenset({Role.SUPER, Role.MANAGEMENT}),
    },
    Resource.TEACHERS: {
        Action.CREATE: _STAFF,
        Action.UPDATE: _STAFF_AND_TEACHER,
        Action.DELETE: _STAFF,
    },
    Resource.STUDENTS: _same(_STAFF_AND_TEACHER),
    Resource.PARENTS: _same(_STAFF),
    Resource.CLASSES: _same(_STAFF),
    Resource.SUBJECTS: _same(_STAFF),
    Resource.LESSONS: {
        Action.CREATE: _STAFF,
        Action.UPDATE: _STAFF_AND_TEACHER,
        Action.DELETE: _STAFF_AND_TEACHER,
    },
    Resource.GRADES: _same(_STAFF),
    Resource.EVENTS: _same(_STAFF_AND_TEACHER),
    Resource.ANNOUNCEMENTS: _same(_STAFF_AND_TEACHER),
    Resource.GALLERY: _same(_STAFF),
    Resource.TERMS: _same(_STAFF),
    Resource.ATTENDANCE: {
        Action.CREATE: _STAFF_AND_TEACHER,
        Action.UPDATE: _STAFF_AND_TEACHER,
        Action.DELETE: _STAFF,
    },
    Resource.NEWS: _same(_STAFF),
}


def is_permitted(role: Role, resource: Resource, action: Action) -> bool:
    if action is Action.READ:
        return True
    return role in WRITERS[resource][action]


def ensure_permitted(role: Role, resource: Resource, action: Action, caller_id: int = None) -> None:
    """Raise PermissionDenied unless ``role`` may perform ``action`` on ``resource``."""
    if not is_permitted(role, resource, action):
        logger.warning(
            f"Permission denied: {role.value} {caller_id} attempted {action.value} on {resource.value}"
        )
        raise PermissionDenied()
