class PersistenceError(Exception):
    """
    Không đọc/ghi được thời điểm bắt đầu từ kho bền vững.

    Lỗi nghiêm trọng: không có phương án dự phòng trong bộ nhớ, vì mặc định về
    "chưa bắt đầu" sẽ đặt lại bộ đếm đang chạy.
    """
