import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar
from zoneinfo import ZoneInfo

from app.config import APP_TIMEZONE

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ----------------- Clock -----------------
class Clock:
    """
    Nguồn thời gian hiện tại theo múi giờ của trung tâm.
    Trả về datetime naive (giờ địa phương) để so sánh với dữ liệu trong DB.
    """

    def __init__(self, tz_name: str = APP_TIMEZONE):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz).replace(tzinfo=None)


class FixedClock(Clock):
    """Clock cố định, dùng cho test và chạy lại job với một mốc thời gian."""

    def __init__(self, fixed_now: datetime):
        self._now = fixed_now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max)


def tomorrow_window(now: datetime) -> Tuple[datetime, datetime]:
    """Khoảng [00:00 ngày mai, 00:00 ngày kia)."""
    tomorrow = datetime.combine(now.date() + timedelta(days=1), time.min)
    return tomorrow, tomorrow + timedelta(days=1)


def is_past(value: Optional[datetime], now: datetime) -> bool:
    """
    Quy tắc chung cho cả tạo và hủy đơn xin nghỉ:
    buổi học được coi là đã qua khi session_date <= now.
    """
    if value is None:
        return True
    return value <= now


def parse_hhmm(value: str) -> time:
    """'08:30' -> time(8, 30). Raise ValueError nếu sai định dạng."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def to_local_naive(value: Optional[datetime], tz_name: str = APP_TIMEZONE) -> Optional[datetime]:
    """Datetime có múi giờ (…+07:00, …Z) được đổi sang giờ địa phương rồi bỏ tzinfo."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


# ----------------- Fail-soft batch -----------------
@dataclass
class BatchResult:
    succeeded: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


def collect_errors(
    items: Iterable[T],
    handler: Callable[[T], bool],
    describe: Callable[[T, Exception], str],
    on_error: Optional[Callable[[], None]] = None,
) -> BatchResult:
    """
    Chạy handler cho từng phần tử; lỗi của một phần tử được ghi vào
    danh sách errors và vòng lặp vẫn tiếp tục.

    handler trả về True nếu xử lý thành công, False nếu bỏ qua.
    on_error (vd: db.rollback) được gọi sau mỗi lỗi.
    """
    result = BatchResult()
    for item in items:
        try:
            if handler(item):
                result.succeeded += 1
            else:
                result.skipped += 1
        except Exception as e:
            message = describe(item, e)
            logger.error(message, exc_info=True)
            result.errors.append(message)
            if on_error is not None:
                on_error()
    return result
