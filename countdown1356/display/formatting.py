"""
Định dạng văn bản hiển thị từ ảnh chụp bộ đếm.
"""

from countdown1356.constants.constants import DisplayText
from countdown1356.core.snapshot import CountdownSnapshot


def format_clock(snapshot: CountdownSnapshot) -> str:
    """
    Chuỗi HH:MM:SS có đệm số 0.
    """
    return DisplayText.TIME_FORMAT.format(
        hours=snapshot.hours, minutes=snapshot.minutes, seconds=snapshot.seconds
    )


def format_surface_text(
    snapshot: CountdownSnapshot, in_progress_text: str = DisplayText.IN_PROGRESS
) -> str:
    """Văn bản ngắn cho dòng trạng thái.

    Còn ít nhất một ngày thì hiển thị số ngày, ngược lại dùng thông điệp chung.
    """
    if snapshot.days > 0:
        return DisplayText.DAYS_REMAINING.format(days=snapshot.days)
    return in_progress_text


def format_status_text(snapshot: CountdownSnapshot) -> str:
    """
    Chỉ báo hoàn thành; rỗng khi bộ đếm còn chạy.
    """
    return DisplayText.COMPLETED if snapshot.is_expired else ""


def format_display_line(snapshot: CountdownSnapshot) -> str:
    line = f"{snapshot.days} days  {format_clock(snapshot)}"
    status = format_status_text(snapshot)
    if status:
        line += f"  {status}"
    return line
