# utils package initialization

from .error_handler import ErrorCode, ToolError

__all__ = ['ErrorCode', 'ToolError']
