"""TaskHub 异常体系

所有业务失败均以 TaskHubError 子类抛出，携带稳定的 code 与可读 message，
由 gateway 的异常处理器映射为 HTTP 响应。
"""


class TaskHubError(Exception):
    """TaskHub 基础异常"""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, recoverable: bool = False) -> None:
        """
        Args:
            message: 错误描述（对调用方可见）
            recoverable: 调用方重试是否可能成功
        """
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class NotFoundError(TaskHubError):
    """引用的实体不存在"""

    code = "NOT_FOUND"
    status_code = 404


class NotTeamMemberError(NotFoundError):
    """指派目标用户存在，但不是任务所属团队的成员"""

    code = "NOT_TEAM_MEMBER"
    status_code = 400

    def __init__(self, message: str = "User is not a member of the team.") -> None:
        super().__init__(message)


class ForbiddenError(TaskHubError):
    """已认证但无权限"""

    code = "FORBIDDEN"
    status_code = 403


class UnauthenticatedError(TaskHubError):
    """缺少或无效的 principal"""

    code = "UNAUTHENTICATED"
    status_code = 401


class ConflictError(TaskHubError):
    """唯一性约束或单团队成员约束冲突"""

    code = "CONFLICT"
    status_code = 409


class InvalidStateError(TaskHubError):
    """其他业务规则违例（例如空 patch）"""

    code = "INVALID_STATE"
    status_code = 400


class UnavailableError(TaskHubError):
    """存储暂时不可用，调用方可重试"""

    code = "UNAVAILABLE"
    status_code = 503

    def __init__(self, message: str = "Store temporarily unavailable.") -> None:
        super().__init__(message, recoverable=True)
