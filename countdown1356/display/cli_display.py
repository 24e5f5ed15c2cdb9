import sys
from typing import TextIO

from countdown1356.core.snapshot import CountdownSnapshot
from countdown1356.display.base_display import BaseDisplay
from countdown1356.display.formatting import format_display_line


class CliDisplay(BaseDisplay):
    """
    Hiển thị trên terminal: ghi đè một dòng mỗi giây.
    """

    def __init__(self, stream: TextIO = None):
        super().__init__()
        self._stream = stream or sys.stdout
        self._running = False
        self._last_line = ""

    async def update_display(self, snapshot: CountdownSnapshot):
        self._write_line(format_display_line(snapshot))

    async def show_error(self, message: str):
        self._write_line(message)

    def _write_line(self, line: str):
        if not self._running:
            return
        # Xóa phần đuôi của dòng cũ nếu dòng mới ngắn hơn
        padding = " " * max(0, len(self._last_line) - len(line))
        self._stream.write(f"\r{line}{padding}")
        self._stream.flush()
        self._last_line = line

    async def start(self):
        self._running = True
        self.logger.info("Khởi động hiển thị CLI")
        self._emit("shown")

    async def close(self):
        if not self._running:
            return
        self._emit("hidden")
        self._running = False
        self._stream.write("\n")
        self._stream.flush()
