"""User / Principal Domain Model

User 持久化于 users 表，password_hash 永不对外暴露。
Principal 为请求期间不可变的认证主体。
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import UserRole


class User(BaseModel):
    """User 数据模型（含密码哈希，仅在服务内部流转）"""

    id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="用户名")
    email: str = Field(description="邮箱，全局唯一")
    password_hash: str = Field(description="bcrypt 哈希")
    role: UserRole = Field(default=UserRole.MEMBER, description="角色")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    def to_profile(self) -> "UserProfile":
        return UserProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class UserProfile(BaseModel):
    """User 对外视图（不含密码哈希）"""

    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserRef(BaseModel):
    """历史记录中关联的操作者信息"""

    id: str
    name: str
    email: str


class Principal(BaseModel):
    """认证主体 -- 请求期间不可变"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="用户 ID")
    role: UserRole = Field(description="角色")
