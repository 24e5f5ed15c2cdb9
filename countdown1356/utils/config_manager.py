import json
from pathlib import Path
from typing import Any, Dict

from countdown1356.utils.logging_config import get_logger
from countdown1356.utils.resource_finder import resource_finder

logger = get_logger(__name__)


class ConfigManager:
    """Trình quản lý cấu hình - Singleton"""

    _instance = None

    # Cấu hình mặc định
    DEFAULT_CONFIG = {
        "SYSTEM_OPTIONS": {
            "DATA_DIR": None,  # None = <thư mục dữ liệu người dùng>/shared_prefs
            "LOG_LEVEL": "INFO",
        },
        "DISPLAY": {
            "WINDOW_SIZE": [480, 320],
            "HIDE_TO_TRAY": True,  # đóng cửa sổ = thu nhỏ vào khay
        },
        "SURFACE": {
            "TITLE": "Countdown 1356",
            "IN_PROGRESS_TEXT": "Countdown in progress",
            "ENABLE_TRAY": True,
        },
    }

    def __new__(cls):
        """
        Đảm bảo chế độ Singleton.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True

        self._init_config_paths()
        self._config = self._load_config()

    def _init_config_paths(self):
        """
        Khởi tạo đường dẫn tệp cấu hình.
        """
        self.config_dir = resource_finder.find_config_dir()
        if not self.config_dir:
            # Không tìm thấy thư mục cấu hình, tạo trong thư mục dữ liệu người dùng
            self.config_dir = resource_finder.get_user_data_dir() / "config"
            self.config_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Tạo thư mục cấu hình: {self.config_dir.absolute()}")

        self.config_file = self.config_dir / "config.json"
        logger.info(f"Tệp cấu hình: {self.config_file.absolute()}")

    def _load_config(self) -> Dict[str, Any]:
        """
        Tải tệp cấu hình, nếu không tồn tại thì tạo cấu hình mặc định.
        """
        try:
            if self.config_file.exists():
                logger.debug(f"Đọc tệp cấu hình: {self.config_file}")
                config = json.loads(self.config_file.read_text(encoding="utf-8"))
                return self._merge_configs(self.DEFAULT_CONFIG, config)

            logger.info("Tệp cấu hình không tồn tại, tạo cấu hình mặc định")
            self._save_config(self.DEFAULT_CONFIG)
            return json.loads(json.dumps(self.DEFAULT_CONFIG))

        except (OSError, ValueError) as e:
            logger.error(f"Lỗi tải cấu hình: {e}")
            return json.loads(json.dumps(self.DEFAULT_CONFIG))

    def _save_config(self, config: dict) -> bool:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            logger.debug(f"Cấu hình đã được lưu vào: {self.config_file}")
            return True
        except OSError as e:
            logger.error(f"Lỗi lưu cấu hình: {e}")
            return False

    @staticmethod
    def _merge_configs(default: dict, custom: dict) -> dict:
        """
        Hợp nhất từ điển cấu hình đệ quy.
        """
        result = default.copy()
        for key, value in custom.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigManager._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def get_config(self, path: str, default: Any = None) -> Any:
        """
        Lấy giá trị cấu hình qua đường dẫn
        path: Đường dẫn ngăn cách bằng dấu chấm, ví dụ "SURFACE.TITLE"
        """
        try:
            value = self._config
            for key in path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_prefs_dir(self) -> Path:
        """
        Thư mục chứa kho tùy chọn bền vững (thời điểm bắt đầu).
        """
        data_dir = self.get_config("SYSTEM_OPTIONS.DATA_DIR")
        if data_dir:
            return Path(data_dir).expanduser()
        return resource_finder.get_user_data_dir() / "shared_prefs"

    @classmethod
    def get_instance(cls):
        """
        Lấy instance trình quản lý cấu hình.
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance
