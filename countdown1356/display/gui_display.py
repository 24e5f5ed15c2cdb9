# -*- coding: utf-8 -*-
"""
Mô-đun hiển thị GUI - cửa sổ PyQt5 hiển thị số ngày và HH:MM:SS.
"""

from abc import ABCMeta
from typing import Optional, Tuple

from PyQt5.QtCore import QEvent, QObject, Qt, QTimer, pyqtSignal
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import QLabel, QVBoxLayout, QWidget

from countdown1356.constants.constants import DisplayText
from countdown1356.core.snapshot import CountdownSnapshot
from countdown1356.display.base_display import BaseDisplay
from countdown1356.display.formatting import format_clock, format_status_text


# Tạo metaclass tương thích
class CombinedMeta(type(QObject), ABCMeta):
    pass


def visibility_transition(old_state, new_state) -> Optional[str]:
    """Chuyển đổi hiển thị khi trạng thái cửa sổ đổi.

    Chỉ thu nhỏ và khôi phục từ thu nhỏ mới tính; phóng to hay bỏ phóng to
    không làm gắn/gỡ màn hình.

    Returns:
        "hidden", "shown" hoặc None
    """
    minimized = int(Qt.WindowMinimized)
    was_minimized = bool(int(old_state) & minimized)
    is_minimized = bool(int(new_state) & minimized)
    if is_minimized and not was_minimized:
        return "hidden"
    if was_minimized and not is_minimized:
        return "shown"
    return None


class _CountdownWindow(QWidget):
    """
    Cửa sổ chính; chuyển các sự kiện hiện/ẩn/đóng thành tín hiệu.
    """

    shown = pyqtSignal()
    hidden = pyqtSignal()
    close_requested = pyqtSignal()

    def __init__(self):
        super().__init__()
        self.allow_close = False

    def showEvent(self, event):
        super().showEvent(event)
        self.shown.emit()

    def hideEvent(self, event):
        super().hideEvent(event)
        self.hidden.emit()

    def changeEvent(self, event):
        super().changeEvent(event)
        if event.type() != QEvent.WindowStateChange:
            return
        transition = visibility_transition(event.oldState(), self.windowState())
        if transition == "hidden":
            self.hidden.emit()
        elif transition == "shown" and self.isVisible():
            self.shown.emit()

    def closeEvent(self, event):
        if self.allow_close:
            event.accept()
            return
        event.ignore()
        self.close_requested.emit()


class GuiDisplay(BaseDisplay, QObject, metaclass=CombinedMeta):
    """Lớp hiển thị GUI"""

    DEFAULT_WINDOW_SIZE = (480, 320)
    DAYS_FONT_SIZE = 56
    TIME_FONT_SIZE = 32
    STATUS_FONT_SIZE = 14

    def __init__(
        self,
        window_size: Tuple[int, int] = DEFAULT_WINDOW_SIZE,
        hide_to_tray: bool = True,
        title: str = "Countdown 1356",
    ):
        super().__init__()
        QObject.__init__(self)

        self.window_size = tuple(window_size)
        self.hide_to_tray = hide_to_tray
        self.title = title

        # Thành phần Qt
        self.root: Optional[_CountdownWindow] = None
        self.days_label: Optional[QLabel] = None
        self.time_label: Optional[QLabel] = None
        self.status_label: Optional[QLabel] = None
        self.system_tray = None

        self._running = False

    # =========================================================================
    # API công cộng
    # =========================================================================

    async def update_display(self, snapshot: CountdownSnapshot):
        if not self.root:
            return
        self.days_label.setText(str(snapshot.days))
        self.time_label.setText(format_clock(snapshot))

        status = format_status_text(snapshot)
        self.status_label.setText(status)
        self.status_label.setVisible(bool(status))

    async def show_error(self, message: str):
        if not self.root:
            return
        self.days_label.setText("-")
        self.time_label.setText("--:--:--")
        self.status_label.setText(message)
        self.status_label.setVisible(True)

    def set_system_tray(self, system_tray):
        """
        Liên kết khay hệ thống (dùng QTimer để đảm bảo chạy trên luồng chính).
        """
        self.system_tray = system_tray
        system_tray.show_window_requested.connect(
            lambda: QTimer.singleShot(0, self.show_window)
        )
        system_tray.quit_requested.connect(
            lambda: QTimer.singleShot(0, lambda: self._emit("quit"))
        )

    async def start(self):
        self._running = True
        self._build_window()
        self.root.show()
        self.logger.info("Khởi động cửa sổ hiển thị")

    async def close(self):
        self._running = False
        if self.root:
            self.root.allow_close = True
            self.root.close()

    # =========================================================================
    # Điều khiển cửa sổ
    # =========================================================================

    def _build_window(self):
        self.root = _CountdownWindow()
        self.root.setWindowTitle(self.title)
        self.root.resize(*self.window_size)

        self.days_label = self._make_label("0", self.DAYS_FONT_SIZE, bold=True)
        self.time_label = self._make_label("00:00:00", self.TIME_FONT_SIZE)
        self.status_label = self._make_label(DisplayText.COMPLETED, self.STATUS_FONT_SIZE)
        self.status_label.setVisible(False)

        layout = QVBoxLayout(self.root)
        layout.addStretch(1)
        layout.addWidget(self.days_label)
        layout.addWidget(self._make_label("days", self.STATUS_FONT_SIZE))
        layout.addWidget(self.time_label)
        layout.addWidget(self.status_label)
        layout.addStretch(1)

        self.root.shown.connect(lambda: self._emit("shown"))
        self.root.hidden.connect(lambda: self._emit("hidden"))
        self.root.close_requested.connect(self._on_close_requested)

    def _make_label(self, text: str, point_size: int, bold: bool = False) -> QLabel:
        label = QLabel(text)
        label.setAlignment(Qt.AlignCenter)
        font = QFont()
        font.setPointSize(point_size)
        font.setBold(bold)
        label.setFont(font)
        return label

    def show_window(self):
        if not self.root:
            return
        if self.root.isMinimized():
            self.root.showNormal()
        if not self.root.isVisible():
            self.root.show()
        self.root.activateWindow()
        self.root.raise_()

    def _on_close_requested(self):
        # Nếu khay hệ thống khả dụng, thu nhỏ vào khay
        if self.hide_to_tray and self.system_tray and self.system_tray.is_available():
            self.logger.info("Đóng cửa sổ: Thu nhỏ vào khay")
            QTimer.singleShot(0, self.root.hide)
        else:
            self._emit("quit")
