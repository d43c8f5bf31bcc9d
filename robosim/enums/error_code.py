from enum import Enum


class ErrorCode(str, Enum):
    MISSING_PARAM = "MISSING_PARAM"
    MISSING_SESSION = "MISSING_SESSION"
    MISSING_TOOL = "MISSING_TOOL"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    EXECUTION_ERROR = "EXECUTION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
