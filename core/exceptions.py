"""
FocusMate 异常定义模块。

定义系统中所有自定义异常的层次结构：
- FocusMateError: 基类，所有已知错误
- ConfigError: 配置文件错误
- StoreError: 状态存储错误 (StoreUnavailableError / StoreWriteError)
- MalformedInputError: 客户端提交的数据无法解析
- FocusMateAPIError: FocusMate 会话接口调用错误
"""
from typing import Any, Optional


class FocusMateError(Exception):
    """FocusMate 基础异常类。

    所有系统内已知错误都继承自此类。
    捕获此类可以处理所有预期的错误情况。
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: 错误描述
            hint: 对用户的操作建议
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        """返回用户友好的错误消息。"""
        if self.hint:
            return f"{self.message}\n💡 Hint: {self.hint}"
        return self.message


class ConfigError(FocusMateError):
    """配置文件错误。

    当配置文件缺失、格式错误或内容非法时抛出。
    """

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"Check config file: {config_path}" if config_path else "Check the store configuration"
        super().__init__(message, hint)
        self.config_path = config_path


class StoreError(FocusMateError):
    """状态存储错误的基类，带后端名称。"""

    def __init__(self, message: str, backend: Optional[str] = None, hint: Optional[str] = None):
        self.backend = backend or "unknown"
        super().__init__(f"[{self.backend}] {message}", hint)


class StoreUnavailableError(StoreError):
    """存储后端不可达、配置错误或返回了无法解析的数据。

    读取时由调用方恢复为默认状态，不应暴露给前端。
    """

    def __init__(self, message: str, backend: Optional[str] = None):
        super().__init__(
            message,
            backend,
            hint="The backend may be unreachable or misconfigured; check config/store.yaml",
        )


class StoreWriteError(StoreError):
    """保存状态失败。不做自动重试。"""

    def __init__(self, message: str, backend: Optional[str] = None):
        super().__init__(message, backend, hint="State was not saved; try again later")


class MalformedInputError(FocusMateError):
    """客户端提交的请求体无法解析。"""

    def __init__(self, message: str):
        super().__init__(message, hint="Body must be a JSON object with allWeeksData, allWeeklyGoals, sessions")


class FocusMateAPIError(FocusMateError):
    """FocusMate 会话接口返回错误或无法连接。"""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class FocusMateConfigError(FocusMateAPIError):
    """未配置 FOCUSMATE_API_KEY。"""

    def __init__(self):
        super().__init__(
            "FOCUSMATE_API_KEY not configured. Add it to the server environment.",
            status_code=500,
        )
        self.hint = "export FOCUSMATE_API_KEY=<your key>"
