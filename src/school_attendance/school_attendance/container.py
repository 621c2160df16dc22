from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .earnings.mysql_earnings_repository import MySQLEarningsRepository
from .earnings.repository import EarningsRepository
from .earnings.service import EarningsService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .reports.service import ReportService
from .roster.mysql_roster_store import MySQLRosterStore
from .roster.repository import RosterStore
from .roster.service import RosterService
from .state.store import StateStore
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    store: StateStore

    users_repo: UserRepository
    students_repo: StudentRepository
    classes_repo: ClassRepository
    attendance_repo: AttendanceRepository
    holidays_repo: HolidayRepository
    earnings_repo: EarningsRepository
    roster_store: RosterStore

    auth_service: AuthService
    student_service: StudentService
    class_service: ClassService
    roster_service: RosterService
    attendance_service: AttendanceService
    holiday_service: HolidayService
    earnings_service: EarningsService
    report_service: ReportService
    dashboard_service: DashboardService

    def reload(self) -> None:
        """Fetch every collection again and replace the state snapshot."""
        self.store.load(
            students=self.students_repo,
            classes=self.classes_repo,
            attendance=self.attendance_repo,
            holidays=self.holidays_repo,
        )


def assemble(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    classes_repo: ClassRepository,
    attendance_repo: AttendanceRepository,
    holidays_repo: HolidayRepository,
    earnings_repo: EarningsRepository,
    roster_store: RosterStore,
    conn: Optional[DatabaseConnection] = None,
    id_factory: Callable[[], str] | None = None,
) -> Container:
    """Wire services over the given repositories (MySQL in production, fakes in tests)."""
    store = StateStore()

    return Container(
        conn=conn,
        store=store,
        users_repo=users_repo,
        students_repo=students_repo,
        classes_repo=classes_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        earnings_repo=earnings_repo,
        roster_store=roster_store,
        auth_service=AuthService(users_repo),
        student_service=StudentService(roster_store, store, id_factory=id_factory),
        class_service=ClassService(classes_repo, roster_store, store, id_factory=id_factory),
        roster_service=RosterService(roster_store, store),
        attendance_service=AttendanceService(attendance_repo, store, id_factory=id_factory),
        holiday_service=HolidayService(holidays_repo, store, id_factory=id_factory),
        earnings_service=EarningsService(earnings_repo, id_factory=id_factory),
        report_service=ReportService(store),
        dashboard_service=DashboardService(store),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    container = assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        earnings_repo=MySQLEarningsRepository(conn),
        roster_store=MySQLRosterStore(conn),
    )
    container.reload()
    return container
