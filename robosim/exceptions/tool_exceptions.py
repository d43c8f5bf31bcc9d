from typing import Any, Dict, Optional

from robosim.enums.error_code import ErrorCode


class ToolException(Exception):
    """Base for all failures raised from inside a tool body"""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        recoverable: bool,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code: ErrorCode = code
        self.message: str = message
        self.recoverable: bool = recoverable
        self.details: Optional[Dict[str, Any]] = details
        super().__init__(message)


class MissingParamException(ToolException):
    def __init__(self, param: str):
        super().__init__(ErrorCode.MISSING_PARAM, f"{param} is required", True)


class MissingSessionException(ToolException):
    def __init__(self):
        super().__init__(ErrorCode.MISSING_SESSION, "session_id is required", True)


class MissingToolException(ToolException):
    def __init__(self):
        super().__init__(ErrorCode.MISSING_TOOL, "tool name is required", True)


class UnknownToolException(ToolException):
    def __init__(self, tool_name: str):
        super().__init__(
            ErrorCode.UNKNOWN_TOOL, f"Unknown tool: {tool_name}", True
        )
