from pydantic import BaseModel, Field
from typing import List, Optional


# Pydantic model cho payload của JWT
class TokenData(BaseModel):
    user_id: Optional[str] = None
    roles: List[str] = []
    full_name: Optional[str] = None


# Pydantic model cho nhân viên đã xác thực
class AuthenticatedUser(BaseModel):
    user_id: str = Field(..., example="staff-01", description="ID của người dùng")
    roles: List[str] = Field(..., example=["admin"], description="Danh sách vai trò của người dùng")
    full_name: Optional[str] = Field(None, example="John Doe", description="Họ và tên đầy đủ")
