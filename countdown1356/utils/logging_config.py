import gzip
import logging
import os
from logging.handlers import TimedRotatingFileHandler

from colorlog import ColoredFormatter


class CompressedTimedRotatingFileHandler(TimedRotatingFileHandler):
    """
    TimedRotatingFileHandler nén file cũ bằng gzip sau khi xoay vòng.
    """

    def doRollover(self):
        super().doRollover()

        log_dir = os.path.dirname(self.baseFilename)
        try:
            filenames = os.listdir(log_dir)
        except OSError:
            return
        for filename in filenames:
            if filename.endswith(".log") and filename != os.path.basename(self.baseFilename):
                filepath = os.path.join(log_dir, filename)
                if not os.path.exists(filepath + ".gz"):
                    self._compress_file(filepath)

    def _compress_file(self, filepath: str):
        # Lỗi nén không được làm hỏng việc ghi log
        try:
            with open(filepath, "rb") as f_in:
                with gzip.open(filepath + ".gz", "wb") as f_out:
                    f_out.writelines(f_in)
            os.remove(filepath)
        except OSError:
            pass


def setup_logging(level="INFO"):
    """
    Thiết lập hệ thống ghi log:
    - Console có màu (colorlog)
    - File xoay vòng theo ngày, nén gzip, giữ 30 ngày
    """
    from .resource_finder import get_user_data_dir

    log_dir = get_user_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "app.log"

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Xóa các handler cũ (tránh add trùng)
    if root_logger.handlers:
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    file_handler = CompressedTimedRotatingFileHandler(
        log_file,
        when="midnight",  # cắt log lúc 0h
        interval=1,
        backupCount=30,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.suffix = "%Y-%m-%d.log"

    formatter = logging.Formatter(
        "%(asctime)s[%(name)s] - %(levelname)s - %(message)s - %(threadName)s"
    )

    color_formatter = ColoredFormatter(
        "%(green)s%(asctime)s%(reset)s[%(blue)s%(name)s%(reset)s] - "
        "%(log_color)s%(levelname)s%(reset)s - %(green)s%(message)s%(reset)s - "
        "%(cyan)s%(threadName)s%(reset)s",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={"asctime": {"green": "green"}, "name": {"blue": "blue"}},
    )
    console_handler.setFormatter(color_formatter)
    file_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    logging.info("Hệ thống log đã khởi tạo, file log: %s", log_file)

    return log_file


def get_logger(name):
    """Lấy logger đã được cấu hình thống nhất.

    Args:
        name: Tên logger (thường dùng __name__)

    Returns:
        logging.Logger: Logger đã cấu hình

    Ví dụ:
        logger = get_logger(__name__)
        logger.info("Đây là một thông tin")
        logger.error_exc("Có lỗi: %s", error_msg)
    """
    logger = logging.getLogger(name)

    def log_error_with_exc(msg, *args, **kwargs):
        """
        Ghi lỗi và tự động kèm stacktrace.
        """
        kwargs["exc_info"] = True
        logger.error(msg, *args, **kwargs)

    logger.error_exc = log_error_with_exc

    return logger
