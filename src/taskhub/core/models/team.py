"""Team / TeamMembership Domain Model

TeamMembership 以 user_id 为主键：一个用户同一时刻最多属于一个团队。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import UserRole


class Team(BaseModel):
    """Team 数据模型"""

    id: str = Field(description="唯一标识，ULID 格式")
    name: str = Field(description="团队名称，全局唯一")
    description: str | None = Field(default=None, description="团队描述")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")


class TeamMembership(BaseModel):
    """用户 -> 团队 的单值映射"""

    user_id: str = Field(description="成员用户 ID（主键）")
    team_id: str = Field(description="所属团队 ID")
    created_at: datetime = Field(description="加入时间")


class TeamMember(BaseModel):
    """团队成员列表项"""

    id: str
    name: str
    email: str
    role: UserRole
