import argparse
import asyncio
import signal
import sys

from countdown1356.application import Application
from countdown1356.utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args():
    """
    Phân tích tham số dòng lệnh.
    """
    parser = argparse.ArgumentParser(description="Bộ đếm ngược 1356 ngày")
    parser.add_argument(
        "--mode",
        choices=["gui", "cli"],
        default="gui",
        help="Chế độ chạy: gui (giao diện đồ họa) hoặc cli (dòng lệnh)",
    )
    parser.add_argument(
        "--boot",
        action="store_true",
        help="Được gọi bởi mục tự khởi chạy khi hệ thống khởi động lại",
    )
    parser.add_argument(
        "--install-autostart",
        action="store_true",
        help="Cài đặt tự khởi chạy khi đăng nhập rồi thoát",
    )
    parser.add_argument(
        "--remove-autostart",
        action="store_true",
        help="Gỡ tự khởi chạy rồi thoát",
    )
    return parser.parse_args()


def handle_autostart(args) -> int:
    from countdown1356.utils.autostart import install_autostart, remove_autostart

    try:
        if args.install_autostart:
            path = install_autostart()
            print(f"Đã cài đặt tự khởi chạy: {path}")
        else:
            removed = remove_autostart()
            print("Đã gỡ tự khởi chạy" if removed else "Chưa cài đặt tự khởi chạy")
        return 0
    except OSError as e:
        logger.error(f"Thao tác tự khởi chạy thất bại: {e}")
        return 1


async def start_app(mode: str, boot: bool) -> int:
    """
    Điểm khởi đầu chung để chạy ứng dụng (trong vòng lặp sự kiện hiện có).
    """
    logger.info("Khởi chạy Countdown 1356")
    app = Application.get_instance()
    return await app.run(mode=mode, boot=boot)


if __name__ == "__main__":
    exit_code = 1
    try:
        args = parse_args()

        from countdown1356.utils.config_manager import ConfigManager

        setup_logging(ConfigManager.get_instance().get_config("SYSTEM_OPTIONS.LOG_LEVEL", "INFO"))

        # Bỏ qua SIGTRAP trên macOS để tránh "trace trap" làm thoát tiến trình
        if hasattr(signal, "SIGTRAP"):
            signal.signal(signal.SIGTRAP, signal.SIG_IGN)

        if args.install_autostart or args.remove_autostart:
            exit_code = handle_autostart(args)
        elif args.mode == "gui":
            # Trong chế độ GUI, tạo QApplication và vòng lặp sự kiện qasync từ main
            try:
                import qasync
                from PyQt5.QtWidgets import QApplication
            except ImportError as e:
                logger.error(f"Chế độ GUI yêu cầu thư viện qasync và PyQt5: {e}")
                sys.exit(1)

            qt_app = QApplication.instance() or QApplication(sys.argv)

            loop = qasync.QEventLoop(qt_app)
            asyncio.set_event_loop(loop)
            logger.info("Đã tạo vòng lặp sự kiện qasync trong main")

            # Ẩn cửa sổ vào khay không được làm dừng vòng lặp sự kiện
            qt_app.setQuitOnLastWindowClosed(False)

            with loop:
                exit_code = loop.run_until_complete(start_app(args.mode, args.boot))
        else:
            # Chế độ CLI sử dụng vòng lặp sự kiện asyncio tiêu chuẩn
            exit_code = asyncio.run(start_app(args.mode, args.boot))

    except KeyboardInterrupt:
        logger.info("Chương trình bị người dùng gián đoạn")
        exit_code = 0
    except Exception as e:
        logger.error(f"Chương trình thoát bất thường: {e}", exc_info=True)
        exit_code = 1
    finally:
        sys.exit(exit_code)
