"""
Role scoping.

``resolve_scope`` turns an already-loaded :class:`CallerContext` into a :class:`Scope`
for one resource and action. It performs no I/O; every relation it needs (form-master
classes, children, ...) is looked up once per request by ``CallerContextService``.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Tuple

from sqlalchemy import false, or_

from schoolhub.core.errors import PermissionDenied, ValidationError
from schoolhub.core.permissions import Action, Resource, ensure_permitted
from schoolhub.schemas.enums import AdminRole, NewsStatus, Role

NO_SCHOOL_ASSOCIATION = "Access denied - no school association found"


@dataclass(frozen=True)
class Caller:
    id: int
    role: Role


@dataclass(frozen=True)
class CallerContext:
    caller: Caller
    name: str = ""
    school_ids: Tuple[int, ...] = ()
    # form-master classes for a teacher, own class for a student, children's classes for a parent
    class_ids: Tuple[int, ...] = ()
    # classes a teacher is form master of or has lessons in
    taught_class_ids: Tuple[int, ...] = ()
    student_ids: Tuple[int, ...] = ()
    parent_ids: Tuple[int, ...] = ()
    teacher_ids: Tuple[int, ...] = ()
    subject_ids: Tuple[int, ...] = ()

    @property
    def id(self) -> int:
        return self.caller.id

    @property
    def role(self) -> Role:
        return self.caller.role

    @property
    def is_super(self) -> bool:
        return self.caller.role is Role.SUPER


@dataclass(frozen=True)
class Condition:
    """``column IN values``, optionally also matching NULL."""
    column: str
    values: FrozenSet[Any]
    include_null: bool = False

    def matches(self, value: Any) -> bool:
        if value is None:
            return self.include_null
        return value in self.values

    def clause(self, model):
        column = getattr(model, self.column)
        clause = column.in_(sorted(self.values, key=str))
        if self.include_null:
            return or_(clause, column.is_(None))
        return clause


@dataclass(frozen=True)
class Scope:
    unrestricted: bool = False
    empty: bool = False
    conditions: Tuple[Condition, ...] = field(default_factory=tuple)

    @classmethod
    def everything(cls) -> "Scope":
        return cls(unrestricted=True)

    @classmethod
    def nothing(cls) -> "Scope":
        return cls(empty=True)

    @classmethod
    def of(cls, conditions: Optional[Iterable[Condition]]) -> "Scope":
        if conditions is None:
            return cls.nothing()
        conditions = tuple(conditions)
        if any(not c.values and not c.include_null for c in conditions):
            return cls.nothing()
        return cls(conditions=conditions)

    def apply(self, stmt, model):
        """Restrict a select/delete/update statement on ``model`` to this scope."""
        if self.unrestricted:
            return stmt
        if self.empty:
            return stmt.where(false())
        for condition in self.conditions:
            stmt = stmt.where(condition.clause(model))
        return stmt

    def permits(self, **values: Any) -> bool:
        """Check prospective column values of a row against the scope.

        Conditions on columns not present in ``values`` are not checked.
        """
        if self.unrestricted:
            return True
        if self.empty:
            return False
        return all(
            condition.matches(values[condition.column])
            for condition in self.conditions
            if condition.column in values
        )

    def without_nulls(self) -> "Scope":
        return replace(
            self,
            conditions=tuple(replace(c, include_null=False) for c in self.conditions)
        )


def _in(column: str, values: Iterable[Any], include_null: bool = False) -> Condition:
    return Condition(column, frozenset(values), include_null)


Rule = Callable[[CallerContext], Optional[Tuple[Condition, ...]]]


def _own_school(ctx: CallerContext) -> Tuple[Condition, ...]:
    return (_in("school_id", ctx.school_ids),)


def _own_school_or_global(ctx: CallerContext) -> Tuple[Condition, ...]:
    return (_in("school_id", ctx.school_ids, include_null=True),)


def _schools(ctx: CallerContext) -> Tuple[Condition, ...]:
    return (_in("id", ctx.school_ids),)


def _nothing(ctx: CallerContext) -> None:
    return None


def _staff_rule(resource: Resource) -> Rule:
    if resource is Resource.SCHOOLS:
        return _schools
    if resource in (Resource.EVENTS, Resource.ANNOUNCEMENTS, Resource.GALLERY, Resource.NEWS):
        return _own_school_or_global
    if resource is Resource.ADMINISTRATIONS:
        def administrations(ctx: CallerContext) -> Tuple[Condition, ...]:
            conditions = _own_school(ctx)
            if ctx.role is Role.ADMIN:
                conditions += (_in("role", [AdminRole.ADMIN]),)
            return conditions
        return administrations
    return _own_school


def _published_news(ctx: CallerContext) -> Tuple[Condition, ...]:
    return _own_school_or_global(ctx) + (_in("status", [NewsStatus.PUBLISHED]),)


def _own_students(ctx: CallerContext) -> Tuple[Condition, ...]:
    return _own_school(ctx) + (_in("student_id", ctx.student_ids),)


def _class_bulletin(classes: Callable[[CallerContext], Tuple[int, ...]]) -> Rule:
    """Events and announcements: rows of the caller's classes plus general ones."""
    def rule(ctx: CallerContext) -> Tuple[Condition, ...]:
        return (
            _in("school_id", ctx.school_ids, include_null=True),
            _in("class_id", classes(ctx), include_null=True),
        )
    return rule


_TEACHER_RULES: Dict[Resource, Rule] = {
    Resource.SCHOOLS: _schools,
    Resource.ADMINISTRATIONS: _nothing,
    Resource.TEACHERS: lambda ctx: (_in("id", [ctx.id]),),
    Resource.STUDENTS: lambda ctx: (_in("class_id", ctx.class_ids),),
    Resource.PARENTS: lambda ctx: (_in("id", ctx.parent_ids),),
    Resource.CLASSES: lambda ctx: (_in("id", ctx.taught_class_ids),),
    Resource.SUBJECTS: lambda ctx: (_in("teacher_id", [ctx.id]),),
    Resource.LESSONS: lambda ctx: (_in("teacher_id", [ctx.id]),),
    Resource.GRADES: _own_school,
    Resource.EVENTS: _class_bulletin(lambda ctx: ctx.taught_class_ids),
    Resource.ANNOUNCEMENTS: _class_bulletin(lambda ctx: ctx.taught_class_ids),
    Resource.GALLERY: _own_school_or_global,
    Resource.TERMS: _own_school,
    Resource.ATTENDANCE: _own_students,
    Resource.NEWS: _published_news,
}

# Students and parents share one rule set; the context already holds the student's own
# ids or the parent's children's ids.
_FAMILY_RULES: Dict[Resource, Rule] = {
    Resource.SCHOOLS: _schools,
    Resource.ADMINISTRATIONS: _nothing,
    Resource.TEACHERS: lambda ctx: (_in("id", ctx.teacher_ids),),
    Resource.STUDENTS: lambda ctx: (_in("id", ctx.student_ids),),
    Resource.PARENTS: lambda ctx: (_in("id", ctx.parent_ids),),
    Resource.CLASSES: lambda ctx: (_in("id", ctx.class_ids),),
    Resource.SUBJECTS: lambda ctx: (_in("id", ctx.subject_ids),),
    Resource.LESSONS: lambda ctx: (_in("class_id", ctx.class_ids),),
    Resource.GRADES: lambda ctx: _own_school(ctx) + (_in("published", [True]),),
    Resource.EVENTS: _class_bulletin(lambda ctx: ctx.class_ids),
    Resource.ANNOUNCEMENTS: _class_bulletin(lambda ctx: ctx.class_ids),
    Resource.GALLERY: _own_school_or_global,
    Resource.TERMS: _own_school,
    Resource.ATTENDANCE: _own_students,
    Resource.NEWS: _published_news,
}


def _read_rule(role: Role, resource: Resource) -> Rule:
    if role in (Role.MANAGEMENT, Role.ADMIN):
        return _staff_rule(resource)
    if role is Role.TEACHER:
        return _TEACHER_RULES.get(resource, _nothing)
    if role in (Role.STUDENT, Role.PARENT):
        return _FAMILY_RULES.get(resource, _nothing)
    return _nothing


def resolve_scope(ctx: CallerContext, resource: Resource, action: Action = Action.READ) -> Scope:
    """Compute the rows of ``resource`` the caller may read or mutate.

    Reads never raise: a caller without a school association, or a role with no access
    to the resource, gets an empty scope. Writes raise ``PermissionDenied`` in both cases.
    Write scopes are derived from the read scope and never include general (NULL) rows.
    """
    if action.is_write:
        ensure_permitted(ctx.role, resource, action, ctx.id)

    if ctx.is_super:
        return Scope.everything()

    if not ctx.school_ids:
        if action.is_write:
            raise PermissionDenied(NO_SCHOOL_ASSOCIATION)
        return Scope.nothing()

    conditions = _read_rule(ctx.role, resource)(ctx)
    if not action.is_write:
        return Scope.of(conditions)

    if (
        resource is Resource.ADMINISTRATIONS
        and action is Action.UPDATE
        and conditions is not None
    ):
        # non-super administrators only edit their own record
        conditions = conditions + (_in("id", [ctx.id]),)
    return Scope.of(conditions).without_nulls()


def resolve_target_school(ctx: CallerContext, requested: Optional[int] = None) -> int:
    """Pick the school a new row belongs to."""
    if ctx.is_super:
        if requested is None:
            raise ValidationError(
                "School ID is required",
                details=[{"field": "school_id", "message": "Field required"}]
            )
        return requested

    if not ctx.school_ids:
        raise PermissionDenied(NO_SCHOOL_ASSOCIATION)
    if requested is None:
        return ctx.school_ids[0]
    if requested not in ctx.school_ids:
        raise PermissionDenied("Access denied - school is outside your association")
    return requested
