# -*- coding: utf-8 -*-
"""
Khay hệ thống - dòng trạng thái bền hiển thị số ngày còn lại.
"""

from abc import ABCMeta
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal
from PyQt5.QtWidgets import QAction, QApplication, QMenu, QStyle, QSystemTrayIcon

from countdown1356.constants.constants import DisplayText
from countdown1356.core.snapshot import CountdownSnapshot
from countdown1356.display.formatting import format_surface_text
from countdown1356.surface.base_surface import BaseSurface


class CombinedMeta(type(QObject), ABCMeta):
    pass


class SystemTray(BaseSurface, QObject, metaclass=CombinedMeta):
    """
    Biểu tượng khay: tooltip và một mục menu không tương tác hiển thị trạng thái.
    """

    show_window_requested = pyqtSignal()
    quit_requested = pyqtSignal()

    def __init__(
        self,
        title: str = "Countdown 1356",
        in_progress_text: str = DisplayText.IN_PROGRESS,
        parent: Optional[QObject] = None,
    ):
        super().__init__()
        QObject.__init__(self, parent)

        self.title = title
        self.in_progress_text = in_progress_text
        self.status_text = ""

        self.tray_icon: Optional[QSystemTrayIcon] = None
        self.tray_menu: Optional[QMenu] = None
        self.status_action: Optional[QAction] = None

        self._setup_tray()

    def _setup_tray(self):
        if not QSystemTrayIcon.isSystemTrayAvailable():
            self.logger.warning("Hệ thống không hỗ trợ khay, chỉ ghi trạng thái vào log")
            return

        icon = QApplication.style().standardIcon(QStyle.SP_MessageBoxInformation)
        self.tray_icon = QSystemTrayIcon(icon)
        self.tray_icon.setToolTip(self.title)

        self.tray_menu = QMenu()

        # Mục trạng thái: chỉ hiển thị, không bấm được
        self.status_action = QAction(self.title, self.tray_menu)
        self.status_action.setEnabled(False)
        self.tray_menu.addAction(self.status_action)
        self.tray_menu.addSeparator()

        show_action = QAction("Show", self.tray_menu)
        show_action.triggered.connect(self.show_window_requested.emit)
        self.tray_menu.addAction(show_action)

        quit_action = QAction("Quit", self.tray_menu)
        quit_action.triggered.connect(self.quit_requested.emit)
        self.tray_menu.addAction(quit_action)

        self.tray_icon.setContextMenu(self.tray_menu)
        self.tray_icon.activated.connect(self._on_activated)
        self.tray_icon.show()
        self.logger.info("Đã khởi tạo khay hệ thống")

    def _on_activated(self, reason):
        if reason in (QSystemTrayIcon.Trigger, QSystemTrayIcon.DoubleClick):
            self.show_window_requested.emit()

    def _set_status(self, text: str):
        self.status_text = text
        if not self.tray_icon:
            self.logger.info(f"{self.title}: {text}")
            return
        self.tray_icon.setToolTip(f"{self.title}\n{text}")
        if self.status_action:
            self.status_action.setText(text)

    async def update_surface(self, snapshot: CountdownSnapshot):
        self._set_status(format_surface_text(snapshot, self.in_progress_text))

    async def show_error(self, message: str):
        self.logger.error(message)
        self._set_status(message)

    def is_available(self) -> bool:
        return self.tray_icon is not None

    def is_visible(self) -> bool:
        return bool(self.tray_icon and self.tray_icon.isVisible())

    def hide(self):
        if self.tray_icon:
            self.tray_icon.hide()

    async def close(self):
        self.hide()
