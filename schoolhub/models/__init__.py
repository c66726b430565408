from .base import Base, TenantModel
from .school import School
from .administration import Administration
from .teacher import Teacher
from .parent import Parent
from .class_ import Class
from .student import Student
from .subject import Subject
from .lesson import Lesson
from .grade import Grade, StudentGrade, ReportCard
from .event import Event
from .announcement import Announcement
from .gallery import GalleryItem
from .admission_counter import AdmissionCounter
from .term import AcademicTerm
from .attendance import Attendance
from .news import NewsPost

__all__ = [
    "Base",
    "TenantModel",
    "School",
    "Administration",
    "Teacher",
    "Parent",
    "Class",
    "Student",
    "Subject",
    "Lesson",
    "Grade",
    "StudentGrade",
    "ReportCard",
    "Event",
    "Announcement",
    "GalleryItem",
    "AdmissionCounter",
    "AcademicTerm",
    "Attendance",
    "NewsPost",
]
