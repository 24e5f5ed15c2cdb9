"""Bơm cập nhật hai nhịp.

Hai chu kỳ độc lập chạy trên cùng một vòng lặp sự kiện:
- surface: mỗi 60 giây, chạy suốt vòng đời tiến trình
- display: mỗi 1 giây, chỉ khi có màn hình hiển thị đang gắn
Mỗi lần kích hoạt đọc ảnh chụp mới từ CountdownStore rồi đẩy ra sink tương ứng.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional

from countdown1356.constants.constants import DisplayText, UpdateCadence
from countdown1356.core.countdown_store import CountdownStore
from countdown1356.core.errors import PersistenceError
from countdown1356.utils.logging_config import get_logger

logger = get_logger(__name__)


class CycleState:
    """
    Trạng thái một chu kỳ cập nhật.
    """

    IDLE = "idle"
    SCHEDULED = "scheduled"
    RUNNING = "running"


class _Cycle:
    """
    Một chu kỳ lặp vô hạn với độ trễ cố định giữa các lần kích hoạt.

    Lần N+1 chỉ được lên lịch sau khi lần N hoàn tất (kể cả khi sink là coroutine).
    """

    def __init__(self, name: str, interval: float, fire: Callable[[], Any]):
        self.name = name
        self.interval = interval
        self.state = CycleState.IDLE
        self.scheduler = None
        self._fire = fire
        self._handle = None
        # Lần kích hoạt coroutine đang chạy, giữ lại kể cả sau khi hủy
        self._task: Optional[asyncio.Future] = None
        # Có yêu cầu kích hoạt ngay trong lúc một lần khác chưa xong
        self._fire_pending = False
        # Tăng mỗi khi hủy, để callback cũ không lên lịch lại
        self._generation = 0

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def fire_now(self) -> None:
        """
        Kích hoạt ngoài nhịp; nếu lần trước còn chạy thì đợi nó xong rồi mới chạy.
        """
        self.cancel()
        if self.in_flight:
            logger.debug(f"[UpdatePump] Chu kỳ {self.name} đang chạy, dời lần kích hoạt")
            self._fire_pending = True
            self.state = CycleState.RUNNING
            return
        self._run(self._generation)

    def cancel(self) -> None:
        self._generation += 1
        self._fire_pending = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        # Không ngắt lần kích hoạt đang chạy, chỉ bỏ lần kế tiếp
        self.state = CycleState.IDLE

    def _run(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._handle = None
        self.state = CycleState.RUNNING

        try:
            result = self._fire()
        except Exception as e:
            logger.error(f"[UpdatePump] Chu kỳ {self.name} lỗi: {e}", exc_info=True)
            result = None

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._task = task
            task.add_done_callback(lambda t: self._on_task_done(t, generation))
        else:
            self._schedule_next(generation)

    def _on_task_done(self, task: asyncio.Future, generation: int) -> None:
        if task.cancelled():
            logger.debug(f"[UpdatePump] Tác vụ chu kỳ {self.name} bị hủy")
        elif task.exception() is not None:
            logger.error(
                f"[UpdatePump] Sink của chu kỳ {self.name} lỗi: {task.exception()}",
                exc_info=task.exception(),
            )
        if self._task is task:
            self._task = None

        if self._fire_pending:
            self._fire_pending = False
            self._run(self._generation)
            return
        self._schedule_next(generation)

    def _schedule_next(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._handle = self.scheduler.call_later(self.interval, self._run, generation)
        self.state = CycleState.SCHEDULED


class UpdatePump:
    """
    Điều phối chu kỳ surface (chậm) và chu kỳ display (nhanh).

    scheduler cần có call_later(delay, callback, *args) trả về handle có cancel();
    mặc định là vòng lặp asyncio đang chạy.
    """

    def __init__(
        self,
        store: CountdownStore,
        surface: Any,
        scheduler: Any = None,
        surface_interval: float = UpdateCadence.SURFACE_INTERVAL,
        display_interval: float = UpdateCadence.DISPLAY_INTERVAL,
    ):
        self._store = store
        self._surface = surface
        self._display: Any = None
        self._scheduler = scheduler
        self._running = False
        self._stopped = False

        self._surface_cycle = _Cycle("surface", surface_interval, self._fire_surface)
        self._display_cycle = _Cycle("display", display_interval, self._fire_display)

    # -------------------------
    # Vòng đời
    # -------------------------
    def start(self) -> None:
        """
        Khởi động: chu kỳ surface chạy ngay, chu kỳ display chạy ngay nếu đã gắn màn hình.
        """
        if self._running:
            logger.warning("[UpdatePump] Đã chạy, bỏ qua yêu cầu khởi động lặp lại")
            return
        if self._stopped:
            logger.warning("[UpdatePump] Đã dừng vĩnh viễn, không thể khởi động lại")
            return

        if self._scheduler is None:
            self._scheduler = asyncio.get_running_loop()
        self._surface_cycle.scheduler = self._scheduler
        self._display_cycle.scheduler = self._scheduler

        self._running = True
        logger.info("[UpdatePump] Khởi động bơm cập nhật")

        self._surface_cycle.fire_now()
        if self._display is not None:
            self._display_cycle.fire_now()

    def stop(self) -> None:
        """
        Hủy cả hai lần kích hoạt đang chờ; không thể khởi động lại.
        """
        if self._stopped:
            return
        self._running = False
        self._stopped = True
        self._surface_cycle.cancel()
        self._display_cycle.cancel()
        logger.info("[UpdatePump] Đã dừng bơm cập nhật")

    # -------------------------
    # Gắn/gỡ màn hình
    # -------------------------
    def attach_display(self, display: Any) -> None:
        """
        Gắn màn hình, kích hoạt ngay một lần ngoài nhịp rồi tiếp tục nhịp 1 giây.
        """
        self._display = display
        logger.debug(f"[UpdatePump] Gắn màn hình: {display.__class__.__name__}")
        if self._running:
            self._display_cycle.fire_now()

    def detach_display(self) -> None:
        """
        Gỡ màn hình; chu kỳ surface không bị ảnh hưởng.
        """
        self._display_cycle.cancel()
        self._display = None
        logger.debug("[UpdatePump] Đã gỡ màn hình, tạm dừng chu kỳ display")

    # -------------------------
    # Truy cập chỉ đọc
    # -------------------------
    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def display_attached(self) -> bool:
        return self._display is not None

    @property
    def surface_state(self) -> str:
        return self._surface_cycle.state

    @property
    def display_state(self) -> str:
        return self._display_cycle.state

    # -------------------------
    # Kích hoạt
    # -------------------------
    def _fire_surface(self):
        return self._deliver("surface", self._surface, "update_surface")

    def _fire_display(self):
        return self._deliver("display", self._display, "update_display")

    def _deliver(self, cycle_name: str, sink: Any, method_name: str):
        if sink is None:
            return None

        try:
            snapshot = self._store.get_snapshot()
        except PersistenceError as e:
            logger.error(f"[UpdatePump] Không tải được bộ đếm ({cycle_name}): {e}")
            return self._call_sink(cycle_name, sink, "show_error", DisplayText.LOAD_ERROR)
        except Exception as e:
            logger.error(
                f"[UpdatePump] Tính ảnh chụp thất bại ({cycle_name}): {e}", exc_info=True
            )
            return None

        return self._call_sink(cycle_name, sink, method_name, snapshot)

    @staticmethod
    def _call_sink(cycle_name: str, sink: Any, method_name: str, arg: Any):
        method = getattr(sink, method_name, None)
        if method is None:
            return None
        try:
            return method(arg)
        except Exception as e:
            logger.error(
                f"[UpdatePump] Sink {cycle_name}.{method_name} lỗi: {e}", exc_info=True
            )
            return None
