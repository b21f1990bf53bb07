"""Exceptions raised while loading uploads, and their per-upload reports."""

from typing import Optional

from models.common_models import ErrorCode
from models.session_models import LoadError


class DashboardError(Exception):
    code: ErrorCode = ErrorCode.E_LOAD_FAILED

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class UnsupportedFileTypeError(DashboardError, ValueError):
    code = ErrorCode.E_UNSUPPORTED_FILE_TYPE


class DecodeError(DashboardError, ValueError):
    code = ErrorCode.E_DECODE_SPREADSHEET


class FileTooLargeError(DashboardError, ValueError):
    code = ErrorCode.E_FILE_TOO_LARGE


class UnknownSessionError(DashboardError, KeyError):
    code = ErrorCode.E_UNKNOWN_SESSION

    def __str__(self) -> str:
        # KeyError would quote the message
        return str(self.args[0]) if self.args else ""


def load_error(file_name: str, exc: Exception) -> LoadError:
    code = exc.code if isinstance(exc, DashboardError) else ErrorCode.E_LOAD_FAILED
    return LoadError(code=code, message=str(exc), file_name=file_name)
