"""Ảnh chụp thời gian còn lại.

Giá trị dẫn xuất, tính lại ở mỗi lần truy vấn và không bao giờ được lưu.
"""

from dataclasses import dataclass

from countdown1356.constants.constants import CountdownConfig


@dataclass(frozen=True)
class CountdownSnapshot:
    """
    Thời gian còn lại được tách thành ngày/giờ/phút/giây.
    """

    days: int
    hours: int
    minutes: int
    seconds: int
    total_millis: int

    @property
    def is_expired(self) -> bool:
        return self.total_millis == 0

    @classmethod
    def from_remaining_millis(cls, remaining_millis: int) -> "CountdownSnapshot":
        """Tách số mili giây còn lại bằng phép chia lấy phần nguyên.

        Mỗi bậc (ngày, giờ, phút, giây) dùng phần dư của bậc trước.

        Args:
            remaining_millis: Số mili giây còn lại, không âm

        Returns:
            CountdownSnapshot: Ảnh chụp tương ứng
        """
        if remaining_millis < 0:
            raise ValueError(f"remaining_millis phải không âm: {remaining_millis}")

        days, rest = divmod(remaining_millis, CountdownConfig.MILLIS_PER_DAY)
        hours, rest = divmod(rest, CountdownConfig.MILLIS_PER_HOUR)
        minutes, rest = divmod(rest, CountdownConfig.MILLIS_PER_MINUTE)
        seconds = rest // CountdownConfig.MILLIS_PER_SECOND

        return cls(
            days=int(days),
            hours=int(hours),
            minutes=int(minutes),
            seconds=int(seconds),
            total_millis=int(remaining_millis),
        )

    def to_dict(self) -> dict:
        return {
            "days": self.days,
            "hours": self.hours,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "total_millis": self.total_millis,
            "is_expired": self.is_expired,
        }
