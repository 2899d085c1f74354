"""TaskHub Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import TaskPriority, TaskStatus, UserRole
from .history import TaskHistoryEntry, TaskHistoryView
from .task import Task, TaskDraft, TaskFilters, TaskPatch
from .team import Team, TeamMember, TeamMembership
from .user import Principal, User, UserProfile, UserRef

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "UserRole",
    # User
    "User",
    "UserProfile",
    "UserRef",
    "Principal",
    # Team
    "Team",
    "TeamMembership",
    "TeamMember",
    # Task
    "Task",
    "TaskDraft",
    "TaskPatch",
    "TaskFilters",
    # History
    "TaskHistoryEntry",
    "TaskHistoryView",
]
