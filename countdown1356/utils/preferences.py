"""Kho khóa-giá trị bền vững.

Mỗi không gian tên là một tệp JSON trong thư mục dữ liệu; ghi bằng cách thay thế
nguyên tử (tệp tạm + os.replace) để không bao giờ để lại tệp ghi dở. Chuỗi
đọc-kiểm tra-ghi giữa nhiều tiến trình được bảo vệ bằng khóa tệp (filelock).
"""

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from filelock import FileLock, Timeout

from countdown1356.core.errors import PersistenceError
from countdown1356.utils.logging_config import get_logger

logger = get_logger(__name__)

# Thời gian chờ tối đa (giây) để giành khóa liên tiến trình
LOCK_TIMEOUT = 10.0


class PreferenceStore:
    """
    Kho tùy chọn đơn giản theo kiểu SharedPreferences.

    Dữ liệu được đọc từ đĩa một lần (lười) rồi giữ trong bộ nhớ; mọi lần ghi đều
    ghi xuống đĩa trước khi cập nhật bộ nhớ.
    """

    def __init__(self, name: str, directory: Path):
        self.name = name
        self.directory = Path(directory)
        self.path = self.directory / f"{name}.json"
        self.lock_path = self.directory / f"{name}.json.lock"
        self._values: Optional[Dict[str, Any]] = None
        self._lock = threading.RLock()

    def _ensure_loaded(self) -> Dict[str, Any]:
        with self._lock:
            if self._values is None:
                self._values = self._load()
            return self._values

    def _load(self) -> Dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"Chưa có tệp tùy chọn, coi như rỗng: {self.path}")
            return {}
        except OSError as e:
            raise PersistenceError(f"Không đọc được {self.path}: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise PersistenceError(f"Tệp tùy chọn hỏng {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceError(
                f"Tệp tùy chọn sai định dạng {self.path}: cần object JSON"
            )
        return data

    def _commit(self, values: Dict[str, Any]) -> None:
        """
        Ghi toàn bộ giá trị xuống đĩa (nguyên tử).
        """
        tmp_path = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.name}.", suffix=".tmp", dir=self.directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(values, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise PersistenceError(f"Không ghi được {self.path}: {e}") from e
        finally:
            if tmp_path is not None:
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.warning(f"Không xóa được tệp tạm: {tmp_path}")

    def contains(self, key: str) -> bool:
        return key in self._ensure_loaded()

    def get_long(self, key: str, default: int = 0) -> int:
        """
        Đọc một số nguyên; sai kiểu là lỗi bền vững chứ không trả về mặc định.
        """
        value = self._ensure_loaded().get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise PersistenceError(
                f"Giá trị '{key}' trong {self.path} không phải số nguyên: {value!r}"
            )
        return value

    def put_long(self, key: str, value: int) -> None:
        with self._lock:
            values = dict(self._ensure_loaded())
            values[key] = int(value)
            self._commit(values)
            self._values = values
        logger.debug(f"Đã lưu {self.name}.{key} = {value}")

    def reload(self) -> None:
        """
        Bỏ bộ nhớ đệm, lần đọc sau sẽ tải lại từ đĩa.
        """
        with self._lock:
            self._values = None

    @contextmanager
    def exclusive(self, timeout: float = LOCK_TIMEOUT) -> Iterator["PreferenceStore"]:
        """Giữ khóa liên tiến trình trên không gian tên này.

        Sau khi giành được khóa, bộ nhớ đệm được bỏ để lần đọc bên trong khối
        thấy giá trị mà tiến trình khác có thể vừa ghi.

        Raises:
            PersistenceError: Không tạo được tệp khóa hoặc hết thời gian chờ
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            file_lock = FileLock(str(self.lock_path), timeout=timeout)
            file_lock.acquire()
        except Timeout as e:
            raise PersistenceError(
                f"Hết thời gian chờ khóa {self.lock_path} sau {timeout}s"
            ) from e
        except OSError as e:
            raise PersistenceError(f"Không khóa được {self.lock_path}: {e}") from e

        try:
            self.reload()
            yield self
        finally:
            file_lock.release()
