"""Kho bộ đếm ngược.

Nguồn sự thật duy nhất về thời điểm bắt đầu, và là thành phần duy nhất tính
ảnh chụp thời gian còn lại.
"""

import threading
import time
from typing import TYPE_CHECKING, Callable

from countdown1356.constants.constants import CountdownConfig, PrefsKeys
from countdown1356.core.snapshot import CountdownSnapshot
from countdown1356.utils.logging_config import get_logger

if TYPE_CHECKING:
    from countdown1356.utils.preferences import PreferenceStore

logger = get_logger(__name__)


def current_time_millis() -> int:
    """
    Đồng hồ thực, mili giây kể từ epoch Unix.
    """
    return int(time.time() * 1000)


class CountdownStore:
    """
    Lưu thời điểm bắt đầu (ghi một lần) và tính thời gian còn lại từ đồng hồ thực.

    Thời gian còn lại chỉ phụ thuộc vào thời điểm bắt đầu và giá trị đồng hồ
    hiện tại, không cộng dồn theo nhịp nên không bị trôi.
    """

    def __init__(
        self,
        preferences: "PreferenceStore",
        clock: Callable[[], int] = current_time_millis,
    ):
        self._prefs = preferences
        self._clock = clock
        # Khóa bao quanh chuỗi đọc-kiểm tra-ghi của initialize_countdown
        self._init_lock = threading.Lock()

    def _read_start_instant(self) -> int:
        return self._prefs.get_long(
            PrefsKeys.KEY_START_TIME_MILLIS, CountdownConfig.UNSET_START_INSTANT
        )

    def _write_start_instant(self, start_millis: int) -> None:
        self._prefs.put_long(PrefsKeys.KEY_START_TIME_MILLIS, start_millis)

    def initialize_countdown(self) -> bool:
        """Ghi thời điểm bắt đầu nếu đây là lần chạy đầu tiên.

        An toàn khi gọi ở mỗi lần khởi động; nhiều luồng hoặc nhiều tiến trình
        (ví dụ tiến trình --boot và một lần mở thủ công) gọi đồng thời thì chỉ
        một bên được ghi.

        Returns:
            bool: True nếu vừa ghi thời điểm bắt đầu, False nếu đã có từ trước

        Raises:
            PersistenceError: Không đọc/ghi được kho bền vững
        """
        # Khóa luồng trong tiến trình, khóa tệp giữa các tiến trình
        with self._init_lock, self._prefs.exclusive():
            start_millis = self._read_start_instant()
            if start_millis != CountdownConfig.UNSET_START_INSTANT:
                logger.debug(f"Bộ đếm đã khởi tạo trước đó, start={start_millis}")
                return False

            now = self._clock()
            self._write_start_instant(now)

        logger.info(f"Lần chạy đầu tiên: ghi thời điểm bắt đầu {now}")
        return True

    def get_start_instant(self) -> int:
        """
        Thời điểm bắt đầu (ms), hoặc 0 nếu chưa khởi tạo.
        """
        return self._read_start_instant()

    def get_remaining_millis(self) -> int:
        """Số mili giây còn lại đến hạn.

        Chưa khởi tạo thì trả về toàn bộ thời lượng. Nếu đồng hồ bị chỉnh lùi
        về trước thời điểm bắt đầu, giá trị trả về lớn hơn thời lượng.
        """
        start_millis = self._read_start_instant()
        if start_millis == CountdownConfig.UNSET_START_INSTANT:
            return CountdownConfig.DURATION_MILLIS

        end_millis = start_millis + CountdownConfig.DURATION_MILLIS
        return max(0, end_millis - self._clock())

    def is_expired(self) -> bool:
        return self.get_remaining_millis() == 0

    def get_snapshot(self) -> CountdownSnapshot:
        return CountdownSnapshot.from_remaining_millis(self.get_remaining_millis())
