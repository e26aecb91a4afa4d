# app/exceptions.py
"""
Các lỗi nghiệp vụ. Mỗi lỗi mang sẵn status code và một thông báo ngắn
hiển thị được cho người dùng; main.py chuyển chúng thành JSON
{"success": false, "message": ...}.
"""
from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Yêu cầu không hợp lệ."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Thiếu thông tin bắt buộc."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Không tìm thấy dữ liệu."


class PastDateError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Buổi học đã diễn ra."


class DuplicateRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Đã có yêu cầu xin nghỉ cho buổi học này."


class InvalidStateError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Trạng thái hiện tại không cho phép thao tác này."


class LeaveAlreadyCancelledError(InvalidStateError):
    """Yêu cầu xin nghỉ không còn tồn tại (chưa từng có hoặc đã bị hủy)."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Không tìm thấy thông tin xin nghỉ hoặc đã được hủy."


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Bạn không có quyền thực hiện thao tác này."


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class UpstreamError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Dịch vụ bên ngoài không phản hồi."
