"""枚举定义

包含 TaskStatus、TaskPriority、UserRole 三个枚举。
TaskStatus 不设合法流转表：任意状态间的变更均被接受，仅由审计日志记录。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(StrEnum):
    """Task 优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class UserRole(StrEnum):
    """用户角色"""

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
