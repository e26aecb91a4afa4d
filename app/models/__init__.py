from .base_model import Base
from .parent_model import Parent
from .student_model import Student
from .class_model import Class, ClassStatus
from .schedule_model import ClassSchedule, ScheduleStatus, AttendanceStatus
from .enrollment_model import Enrollment, EnrollmentStatus
from .makeup_model import MakeupClass, MakeupStatus, MakeupType
from .notification_model import Notification, NotificationType
