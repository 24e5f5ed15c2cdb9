import asyncio
import signal
import threading
from typing import Any, Optional

from countdown1356.constants.constants import DisplayText, LifecycleTrigger, PrefsKeys
from countdown1356.core.countdown_store import CountdownStore
from countdown1356.core.errors import PersistenceError
from countdown1356.core.update_pump import UpdatePump
from countdown1356.utils.config_manager import ConfigManager
from countdown1356.utils.logging_config import get_logger
from countdown1356.utils.preferences import PreferenceStore

logger = get_logger(__name__)


class Application:
    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = Application()
        return cls._instance

    def __init__(self, store: Optional[CountdownStore] = None, scheduler: Any = None):
        if Application._instance is not None:
            logger.error("Cố gắng tạo nhiều thể hiện của Application")
            raise Exception("Application là lớp singleton, vui lòng sử dụng get_instance() để lấy thể hiện")
        Application._instance = self

        logger.debug("Khởi tạo thể hiện Application")

        self.config = ConfigManager.get_instance()

        # Trạng thái
        self.running = False
        self.mode = "gui"

        # Thành phần lõi (scheduler=None: dùng vòng lặp asyncio đang chạy)
        self.store = store
        self.pump: Optional[UpdatePump] = None
        self._scheduler = scheduler
        self._start_lock = threading.Lock()

        # Hiển thị
        self.display = None
        self.surface = None
        self._display_wanted = False

        self._shutdown_event: asyncio.Event | None = None
        self._main_loop: asyncio.AbstractEventLoop | None = None

    # -------------------------
    # Vòng đời
    # -------------------------
    async def run(self, *, mode: str = "gui", boot: bool = False) -> int:
        logger.info(f"Khởi động Application, mode={mode}, boot={boot}")
        try:
            self.running = True
            self.mode = mode
            self._main_loop = asyncio.get_running_loop()
            self._shutdown_event = asyncio.Event()

            self._create_views(mode)
            self._install_signal_handlers()

            try:
                if boot:
                    self.on_system_restart()
                else:
                    self.on_process_start()
            except PersistenceError as e:
                logger.error(f"Không tải được bộ đếm, dừng ứng dụng: {e}")
                await self._report_load_error(str(e))
                return 1

            await self.display.start()
            await self._wait_shutdown()
            return 0

        except Exception as e:
            logger.error_exc(f"Chạy ứng dụng thất bại: {e}")
            return 1
        finally:
            try:
                await self.shutdown()
            except Exception as e:
                logger.error(f"Lỗi khi đóng ứng dụng: {e}")

    def on_process_start(self) -> bool:
        """
        Kích hoạt "khởi động tiến trình".
        """
        return self._start_countdown(LifecycleTrigger.PROCESS_START)

    def on_system_restart(self) -> bool:
        """
        Kích hoạt "khởi động lại hệ thống" - cùng trình tự với khởi động tiến trình.
        """
        return self._start_countdown(LifecycleTrigger.SYSTEM_RESTART)

    def _start_countdown(self, trigger: str) -> bool:
        """Khởi tạo bộ đếm (idempotent) rồi khởi động bơm cập nhật nếu chưa chạy.

        Returns:
            bool: True nếu đây là lần chạy đầu tiên
        """
        store = self._ensure_store()
        first_launch = store.initialize_countdown()
        logger.info(
            f"Kích hoạt {trigger}: first_launch={first_launch}, "
            f"start={store.get_start_instant()}"
        )

        with self._start_lock:
            if self.pump is None:
                self.pump = UpdatePump(store, self.surface, scheduler=self._scheduler)
                if self._display_wanted and self.display is not None:
                    self.pump.attach_display(self.display)
                self.pump.start()
            else:
                logger.debug("Bơm cập nhật đã chạy, không khởi động lại")
        return first_launch

    def _ensure_store(self) -> CountdownStore:
        if self.store is None:
            prefs = PreferenceStore(PrefsKeys.PREFS_NAME, self.config.get_prefs_dir())
            self.store = CountdownStore(prefs)
            logger.info(f"Kho bộ đếm: {prefs.path}")
        return self.store

    async def _wait_shutdown(self) -> None:
        await self._shutdown_event.wait()

    def request_shutdown(self) -> None:
        if self._shutdown_event is not None and not self._shutdown_event.is_set():
            logger.info("Nhận yêu cầu thoát")
            self._shutdown_event.set()

    # -------------------------
    # Hiển thị
    # -------------------------
    def set_views(self, display, surface) -> None:
        """
        Gán sẵn display/surface (bỏ qua việc tạo theo chế độ).
        """
        self.display = display
        self.surface = surface

    def _create_views(self, mode: str) -> None:
        if self.display is None or self.surface is None:
            if mode == "gui":
                self._create_gui_views()
            else:
                self._create_cli_views()

        self.display.set_callbacks(
            shown_callback=self.attach_display,
            hidden_callback=self.detach_display,
            quit_callback=self.request_shutdown,
        )

    def _create_gui_views(self) -> None:
        from countdown1356.display.gui_display import GuiDisplay

        title = self.config.get_config("SURFACE.TITLE", "Countdown 1356")
        self.display = GuiDisplay(
            window_size=self.config.get_config("DISPLAY.WINDOW_SIZE", [480, 320]),
            hide_to_tray=bool(self.config.get_config("DISPLAY.HIDE_TO_TRAY", True)),
            title=title,
        )

        if self.config.get_config("SURFACE.ENABLE_TRAY", True):
            from countdown1356.views.components.system_tray import SystemTray

            self.surface = SystemTray(
                title=title,
                in_progress_text=self.config.get_config(
                    "SURFACE.IN_PROGRESS_TEXT", DisplayText.IN_PROGRESS
                ),
            )
            self.display.set_system_tray(self.surface)
        else:
            self.surface = self._make_log_surface()

    def _create_cli_views(self) -> None:
        from countdown1356.display.cli_display import CliDisplay

        self.display = CliDisplay()
        self.surface = self._make_log_surface()

    def _make_log_surface(self):
        from countdown1356.surface.log_surface import LogSurface

        return LogSurface(
            title=self.config.get_config("SURFACE.TITLE", ""),
            in_progress_text=self.config.get_config(
                "SURFACE.IN_PROGRESS_TEXT", DisplayText.IN_PROGRESS
            ),
        )

    def attach_display(self) -> None:
        """
        Cửa sổ hiện ra: gắn vào bơm, cập nhật ngay lập tức.
        """
        self._display_wanted = True
        if self.pump is not None and self.display is not None:
            self.pump.attach_display(self.display)

    def detach_display(self) -> None:
        """
        Cửa sổ bị ẩn: gỡ khỏi bơm, chu kỳ surface vẫn chạy.
        """
        self._display_wanted = False
        if self.pump is not None:
            self.pump.detach_display()

    async def _report_load_error(self, details: str) -> None:
        try:
            await self.display.start()
            await self.display.show_error(DisplayText.LOAD_ERROR)
            await self.surface.show_error(DisplayText.LOAD_ERROR)
        except Exception as e:
            logger.warning(f"Không hiển thị được thông báo lỗi: {e}")

        if self.mode == "gui":
            try:
                from PyQt5.QtWidgets import QMessageBox

                QMessageBox.critical(
                    None,
                    "Countdown 1356",
                    f"{DisplayText.LOAD_ERROR}.\n{details}",
                )
            except Exception as e:
                logger.warning(f"Không hiển thị được hộp thoại lỗi: {e}")

    # -------------------------
    # Tín hiệu hệ điều hành
    # -------------------------
    def _install_signal_handlers(self) -> None:
        handlers = {
            "SIGINT": self.request_shutdown,
            "SIGTERM": self.request_shutdown,
            "SIGHUP": self._on_restart_signal,
        }
        for name, handler in handlers.items():
            sig = getattr(signal, name, None)
            if sig is None:
                continue
            try:
                self._main_loop.add_signal_handler(sig, handler)
            except (NotImplementedError, RuntimeError, ValueError):
                # Vòng lặp qasync/Windows không hỗ trợ add_signal_handler
                try:
                    signal.signal(
                        sig,
                        lambda *_, h=handler: self._main_loop.call_soon_threadsafe(h),
                    )
                except (OSError, RuntimeError, ValueError) as e:
                    logger.debug(f"Không thiết lập được bộ xử lý {name}: {e}")

    def _on_restart_signal(self) -> None:
        try:
            self.on_system_restart()
        except PersistenceError as e:
            logger.error(f"Kích hoạt khởi động lại thất bại: {e}")

    # -------------------------
    # Dừng
    # -------------------------
    async def shutdown(self):
        if not self.running:
            return
        logger.info("Đang đóng Application...")
        self.running = False

        if self._shutdown_event is not None:
            self._shutdown_event.set()

        try:
            if self.pump is not None:
                self.pump.stop()

            if self.display is not None:
                await self.display.close()
            if self.surface is not None:
                await self.surface.close()

            logger.info("Đóng Application hoàn tất")
        except Exception as e:
            logger.error(f"Lỗi khi đóng ứng dụng: {e}", exc_info=True)
