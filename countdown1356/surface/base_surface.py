from abc import ABC, abstractmethod

from countdown1356.core.snapshot import CountdownSnapshot
from countdown1356.utils.logging_config import get_logger


class BaseSurface(ABC):
    """
    Lớp cơ sở cho dòng trạng thái bền (nhịp 60 giây), chạy kể cả khi không có cửa sổ.
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    async def update_surface(self, snapshot: CountdownSnapshot):
        """
        Cập nhật văn bản trạng thái ngắn.
        """

    async def show_error(self, message: str):
        """
        Mặc định chỉ ghi log - lớp con có thể hiển thị.
        """
        self.logger.error(message)

    async def close(self):
        pass
