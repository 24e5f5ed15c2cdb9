class CountdownConfig:
    """
    Cấu hình cố định của bộ đếm ngược.
    """

    DURATION_DAYS = 1356
    MILLIS_PER_SECOND = 1000
    MILLIS_PER_MINUTE = 60 * MILLIS_PER_SECOND
    MILLIS_PER_HOUR = 60 * MILLIS_PER_MINUTE
    MILLIS_PER_DAY = 24 * MILLIS_PER_HOUR
    # 1356 ngày = 117 158 400 000 ms
    DURATION_MILLIS = DURATION_DAYS * MILLIS_PER_DAY

    # Giá trị canh gác: chưa từng ghi thời điểm bắt đầu
    UNSET_START_INSTANT = 0


class PrefsKeys:
    """
    Không gian tên và khóa của kho lưu trữ bền vững.
    """

    PREFS_NAME = "Countdown1356Prefs"
    KEY_START_TIME_MILLIS = "start_time_millis"


class UpdateCadence:
    """
    Chu kỳ cập nhật (giây).
    """

    SURFACE_INTERVAL = 60.0  # khay hệ thống / dòng trạng thái
    DISPLAY_INTERVAL = 1.0  # cửa sổ hiển thị trực tiếp


class LifecycleTrigger:
    """
    Nguồn kích hoạt khởi động bộ đếm.
    """

    PROCESS_START = "process_start"
    SYSTEM_RESTART = "system_restart"


class DisplayText:
    """
    Văn bản hiển thị cho người dùng.
    """

    DAYS_REMAINING = "{days} days remaining"
    IN_PROGRESS = "Countdown in progress"
    COMPLETED = "Countdown completed!"
    LOAD_ERROR = "Unable to load countdown"
    TIME_FORMAT = "{hours:02d}:{minutes:02d}:{seconds:02d}"
