from .administration_service import AdministrationService
from .announcement_service import AnnouncementService
from .attendance_service import AttendanceService
from .auth_service import AuthService
from .class_service import ClassService
from .context_service import CallerContextService
from .event_service import EventService
from .gallery_service import GalleryService
from .grade_service import GradeService
from .lesson_service import LessonService
from .news_service import NewsService
from .parent_service import ParentService
from .school_service import SchoolService
from .stats_service import StatsService
from .student_service import StudentService
from .subject_service import SubjectService
from .teacher_service import TeacherService
from .term_service import TermService

__all__ = [
    "AdministrationService",
    "AnnouncementService",
    "AttendanceService",
    "AuthService",
    "CallerContextService",
    "ClassService",
    "EventService",
    "GalleryService",
    "GradeService",
    "LessonService",
    "NewsService",
    "ParentService",
    "SchoolService",
    "StatsService",
    "StudentService",
    "SubjectService",
    "TeacherService",
    "TermService",
]
