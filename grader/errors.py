from dataclasses import asdict, dataclass
from enum import Enum


class ErrorCode(str, Enum):
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    EXECUTION_ERROR = 'EXECUTION_ERROR'
    DATABASE_ERROR = 'DATABASE_ERROR'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'


@dataclass
class ErrorInfo:
    code: ErrorCode
    message: str

    def to_dict(self):
        return asdict(self)


class GraderError(Exception):
    code = ErrorCode.UNKNOWN_ERROR

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(code=self.code, message=str(self))


class SubmissionValidationError(GraderError):
    code = ErrorCode.VALIDATION_ERROR


class ExecutionError(GraderError):
    code = ErrorCode.EXECUTION_ERROR


class DatabaseError(GraderError):
    code = ErrorCode.DATABASE_ERROR
