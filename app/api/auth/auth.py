#app/api/auth/auth.py
import hmac
import logging
from typing import List, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt # type: ignore

from app import config
from app.exceptions import AuthError
from app.schemas.auth_schema import TokenData, AuthenticatedUser

logger = logging.getLogger(__name__)

# Token do hệ thống đăng nhập của trung tâm cấp, ký HS256 bằng SECRET_KEY
ALGORITHM = "HS256"

bearer_scheme = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
        user_id: Optional[str] = payload.get("sub")
        if user_id is None:
            raise _credentials_exception()
        return TokenData(
            user_id=str(user_id),
            roles=payload.get("roles") or [],
            full_name=payload.get("name"),
        )
    except JWTError:
        raise _credentials_exception()


def get_current_active_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    if credentials is None:
        raise _credentials_exception()
    token_data = verify_token(credentials.credentials)
    return AuthenticatedUser(
        user_id=token_data.user_id,
        roles=token_data.roles,
        full_name=token_data.full_name,
    )


def has_roles(required_roles: List[str]):
    """
    Dependency factory để kiểm tra quyền truy cập dựa trên vai trò.
    Hàm này trả về một dependency mới dựa trên danh sách vai trò yêu cầu.
    """
    def role_checker(current_user: AuthenticatedUser = Depends(get_current_active_user)):
        # Kiểm tra xem người dùng có ít nhất một trong các vai trò yêu cầu không
        if not any(role in required_roles for role in current_user.roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Bạn không có quyền để thực hiện hành động này."
            )
        return current_user
    return role_checker


def verify_cron_secret(request: Request) -> None:
    """
    Xác thực lời gọi từ bộ lập lịch bên ngoài: Authorization: Bearer <CRON_SECRET>.
    Chưa cấu hình CRON_SECRET thì từ chối mọi lời gọi.
    """
    secret = config.CRON_SECRET
    auth_header = request.headers.get("authorization", "")
    expected = f"Bearer {secret}"
    if not secret or not hmac.compare_digest(auth_header.encode(), expected.encode()):
        logger.warning(f"Rejected cron call to {request.url.path}")
        raise AuthError()
