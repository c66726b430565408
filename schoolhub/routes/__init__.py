from . import (
    administrations, announcements, attendance, auth, classes, events, gallery, grades, lessons,
    news, parents, schools, stats, students, subjects, teachers, terms,
)

routers = [
    auth.router,
    schools.router,
    administrations.router,
    teachers.router,
    students.router,
    parents.router,
    classes.router,
    subjects.router,
    lessons.router,
    grades.router,
    terms.router,
    attendance.router,
    events.router,
    announcements.router,
    news.router,
    gallery.router,
    stats.router,
]

__all__ = ["routers"]
