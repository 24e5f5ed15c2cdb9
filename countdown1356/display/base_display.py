from abc import ABC, abstractmethod
from typing import Callable, Optional

from countdown1356.core.snapshot import CountdownSnapshot
from countdown1356.utils.logging_config import get_logger


class BaseDisplay(ABC):
    """
    Lớp cơ sở trừu tượng cho màn hình hiển thị bộ đếm (nhịp 1 giây).
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)
        self._callbacks = {
            "shown": None,
            "hidden": None,
            "quit": None,
        }

    def set_callbacks(
        self,
        shown_callback: Optional[Callable] = None,
        hidden_callback: Optional[Callable] = None,
        quit_callback: Optional[Callable] = None,
    ):
        """
        Thiết lập callback: hiện (gắn), ẩn (gỡ), yêu cầu thoát.
        """
        self._callbacks.update(
            {
                "shown": shown_callback,
                "hidden": hidden_callback,
                "quit": quit_callback,
            }
        )

    def _emit(self, name: str):
        callback = self._callbacks.get(name)
        if callback is None:
            return
        try:
            callback()
        except Exception as e:
            self.logger.error(f"Callback '{name}' lỗi: {e}", exc_info=True)

    @abstractmethod
    async def update_display(self, snapshot: CountdownSnapshot):
        """
        Hiển thị số ngày, HH:MM:SS và chỉ báo hoàn thành.
        """

    @abstractmethod
    async def show_error(self, message: str):
        """
        Hiển thị lỗi tải bộ đếm (thay vì một bộ đếm bị đặt lại âm thầm).
        """

    @abstractmethod
    async def start(self):
        """
        Khởi động hiển thị.
        """

    @abstractmethod
    async def close(self):
        """
        Đóng hiển thị.
        """
