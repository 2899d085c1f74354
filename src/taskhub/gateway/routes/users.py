"""用户与会话路由

POST   /users      注册
PATCH  /users      更新当前用户资料
DELETE /users      注销当前用户
POST   /sessions   邮箱+密码登录，签发令牌
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from taskhub.core.config import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USER_NAME_MAX_LENGTH,
)
from taskhub.core.models import Principal, UserProfile

from ..deps import get_auth_config, get_store_group, require_principal
from ..services.user_service import UserService

router = APIRouter()


class UserCreateRequest(BaseModel):
    """注册请求体"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=USER_NAME_MAX_LENGTH)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class UserUpdateRequest(BaseModel):
    """资料更新请求体 -- 至少提供一个字段"""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=USER_NAME_MAX_LENGTH)
    email: EmailStr | None = None
    password: str | None = Field(
        default=None,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
    )

    @model_validator(mode="after")
    def _require_any_field(self) -> "UserUpdateRequest":
        if self.name is None and self.email is None and self.password is None:
            raise ValueError("At least one field must be provided to update")
        return self


class SessionRequest(BaseModel):
    """登录请求体"""

    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class SessionResponse(BaseModel):
    """登录响应"""

    token: str
    user: UserProfile


@router.post("/users", status_code=201, response_model=UserProfile)
async def register_user(body: UserCreateRequest, store_group=Depends(get_store_group)):
    """注册新用户"""
    user = await UserService(store_group).register(body.name, body.email, body.password)
    return user.to_profile()


@router.patch("/users", response_model=UserProfile)
async def update_user(
    body: UserUpdateRequest,
    principal: Principal = Depends(require_principal),
    store_group=Depends(get_store_group),
):
    """更新当前用户资料"""
    user = await UserService(store_group).update_profile(
        principal.id,
        name=body.name,
        email=body.email,
        password=body.password,
    )
    return user.to_profile()


@router.delete("/users")
async def delete_user(
    principal: Principal = Depends(require_principal),
    store_group=Depends(get_store_group),
):
    """注销当前用户"""
    await UserService(store_group).delete_account(principal.id)
    return {"message": "User deleted successfully."}


@router.post("/sessions", response_model=SessionResponse)
async def create_session(
    body: SessionRequest,
    store_group=Depends(get_store_group),
    config=Depends(get_auth_config),
):
    """邮箱+密码登录"""
    token, user = await UserService(store_group).create_session(
        body.email, body.password, config
    )
    return SessionResponse(token=token, user=user.to_profile())
