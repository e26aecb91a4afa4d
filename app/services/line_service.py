import logging

import requests

from app import config
from app.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def push_message(line_user_id: str, message: str, access_token: str | None = None) -> None:
    """
    Gửi một tin nhắn văn bản tới người dùng LINE qua Messaging API.
    Raise UpstreamError nếu chưa cấu hình token hoặc LINE trả lỗi.
    """
    token = access_token or config.LINE_CHANNEL_ACCESS_TOKEN
    if not token:
        raise UpstreamError("Chưa cấu hình Channel Access Token của LINE.")

    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }
    payload = {
        "to": line_user_id,
        "messages": [{"type": "text", "text": message}],
    }

    try:
        response = requests.post(
            config.LINE_PUSH_URL,
            json=payload,
            headers=headers,
            timeout=config.LINE_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error(f"LINE push failed for {line_user_id}: {e}")
        raise UpstreamError("Không thể kết nối tới LINE.") from e

    if response.status_code != 200:
        try:
            error_info = response.json()
        except ValueError:
            error_info = response.text
        logger.error(f"LINE push rejected. Status: {response.status_code}, Response: {error_info}")
        raise UpstreamError(f"LINE từ chối tin nhắn (status {response.status_code}).")
