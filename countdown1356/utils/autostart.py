"""Tự khởi chạy khi đăng nhập hệ điều hành.

Mục tự khởi chạy gọi main.py với cờ --boot, tức là kích hoạt "khởi động lại hệ thống"
của ứng dụng. Hỗ trợ Linux (XDG autostart), macOS (LaunchAgent) và Windows (thư mục Startup).
"""

import os
import plistlib
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from countdown1356.utils.logging_config import get_logger
from countdown1356.utils.resource_finder import get_project_root

logger = get_logger(__name__)

AUTOSTART_ID = "countdown1356"
LAUNCH_AGENT_LABEL = "com.countdown1356.boot"


def build_launch_command(python: Optional[str] = None, script: Optional[Path] = None) -> List[str]:
    """
    Lệnh chạy ứng dụng ở chế độ khởi động hệ thống.
    """
    python = python or sys.executable
    script = script or (get_project_root() / "main.py")
    return [str(python), str(script), "--boot"]


def get_autostart_path(platform_name: str = sys.platform, home: Optional[Path] = None) -> Path:
    home = Path(home) if home else Path.home()
    if platform_name == "darwin":
        return home / "Library" / "LaunchAgents" / f"{LAUNCH_AGENT_LABEL}.plist"
    if platform_name == "win32":
        appdata = Path(os.getenv("APPDATA") or home / "AppData" / "Roaming")
        return (
            appdata / "Microsoft" / "Windows" / "Start Menu" / "Programs"
            / "Startup" / f"{AUTOSTART_ID}.cmd"
        )
    config_home = Path(os.getenv("XDG_CONFIG_HOME") or home / ".config")
    return config_home / "autostart" / f"{AUTOSTART_ID}.desktop"


def _render(platform_name: str, command: List[str]) -> bytes:
    if platform_name == "darwin":
        return plistlib.dumps(
            {
                "Label": LAUNCH_AGENT_LABEL,
                "ProgramArguments": command,
                "RunAtLoad": True,
            }
        )
    if platform_name == "win32":
        quoted = " ".join(f'"{part}"' for part in command)
        return f"@echo off\r\nstart \"\" {quoted}\r\n".encode("utf-8")
    return (
        "[Desktop Entry]\n"
        "Type=Application\n"
        "Name=Countdown 1356\n"
        f"Exec={shlex.join(command)}\n"
        "X-GNOME-Autostart-enabled=true\n"
    ).encode("utf-8")


def install_autostart(
    platform_name: str = sys.platform,
    home: Optional[Path] = None,
    command: Optional[List[str]] = None,
) -> Path:
    """Ghi mục tự khởi chạy cho người dùng hiện tại.

    Returns:
        Path: Đường dẫn tệp đã ghi
    """
    path = get_autostart_path(platform_name, home)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(_render(platform_name, command or build_launch_command()))
    logger.info(f"Đã cài đặt tự khởi chạy: {path}")
    return path


def remove_autostart(platform_name: str = sys.platform, home: Optional[Path] = None) -> bool:
    path = get_autostart_path(platform_name, home)
    if not path.exists():
        logger.info("Chưa cài đặt tự khởi chạy")
        return False
    path.unlink()
    logger.info(f"Đã gỡ tự khởi chạy: {path}")
    return True
