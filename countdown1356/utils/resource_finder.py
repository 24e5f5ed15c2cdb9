# resource_finder.py
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]
APP_NAME = "Countdown1356"


class ResourceFinder:
    """
    Định vị tài nguyên thống nhất: phát triển, PyInstaller (onedir/onefile), sau khi cài đặt.
    """

    _instance: "ResourceFinder" = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if getattr(self, "_initd", False):
            return
        self._initd = True

        # Thư mục cơ sở chạy (_MEIPASS / exe_dir / project_root)
        self._base_dir = self._runtime_base_dir()
        self._app_name = os.getenv("APP_NAME") or APP_NAME

    # -------------- API công khai --------------

    def get_project_root(self) -> Path:
        """
        Ở chế độ phát triển trả về gốc mã nguồn; chế độ đóng gói trả về thư mục cơ sở chạy.
        """
        if not self._is_frozen():
            return self._detect_project_root(default=self._base_dir)
        return self._base_dir

    def get_user_data_dir(self, create: bool = True) -> Path:
        """
        Thư mục dữ liệu người dùng (có thể ghi). Biến môi trường COUNTDOWN1356_DATA_DIR ghi đè.
        """
        override = os.getenv(self._env_key("DATA_DIR"))
        if override:
            p = Path(override)
        else:
            home = Path.home()
            if sys.platform == "win32":
                p = home / "AppData" / "Local" / self._app_name
            elif sys.platform == "darwin":
                p = home / "Library" / "Application Support" / self._app_name
            else:
                p = home / ".local" / "share" / self._app_name
        if create:
            p.mkdir(parents=True, exist_ok=True)
        return p.resolve()

    def find_directory(self, relpath: PathLike) -> Optional[Path]:
        return self._find_dir(relpath)

    def find_config_dir(self) -> Optional[Path]:
        return self.find_directory("config")

    # -------------- Triển khai nội bộ --------------

    def _env_key(self, suffix: str) -> str:
        canon = "".join(ch if ch.isalnum() else "_" for ch in self._app_name).upper()
        return f"{canon}_{suffix}"

    def _is_frozen(self) -> bool:
        return getattr(sys, "frozen", False)

    def _runtime_base_dir(self) -> Path:
        if self._is_frozen():
            return Path(getattr(sys, "_MEIPASS", Path(sys.executable).parent)).resolve()
        # Tệp này nằm ở project/countdown1356/utils/resource_finder.py → parents[2] là project/
        return self._detect_project_root(default=Path(__file__).resolve().parents[2])

    def _detect_project_root(self, default: Path) -> Path:
        """
        Tìm ngược lên đường dẫn có tệp/thư mục đánh dấu.
        """
        markers = {"pyproject.toml", "main.py", ".git"}
        for parent in [default] + list(default.parents):
            try:
                entries = {e.name for e in parent.iterdir()}
            except OSError:
                continue
            if markers & entries:
                return parent.resolve()
        return default.resolve()

    def _search_dirs(self) -> List[Path]:
        dirs: List[Path] = []
        override = os.getenv(self._env_key("HOME"))
        if override and Path(override).exists():
            dirs.append(Path(override).resolve())
        dirs.append(self._base_dir)
        dirs.append(self.get_user_data_dir(create=False))

        out, seen = [], set()
        for d in dirs:
            if d not in seen:
                out.append(d)
                seen.add(d)
        return out

    def _find_dir(self, relpath: PathLike) -> Optional[Path]:
        rp = Path(relpath)
        if rp.is_absolute():
            try:
                ok = rp.is_dir()
            except OSError:
                ok = False
            return rp if ok else None

        for base in self._search_dirs():
            p = (base / rp).resolve()
            try:
                ok = p.is_dir()
            except OSError:
                ok = False
            if ok:
                return p
        return None


# --------- Singleton và các hàm tiện ích ---------
resource_finder = ResourceFinder()


def get_project_root() -> Path:
    return resource_finder.get_project_root()


def get_user_data_dir(create: bool = True) -> Path:
    return resource_finder.get_user_data_dir(create)
