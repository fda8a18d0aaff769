from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .comparison import compare_outputs
from .errors import ErrorInfo
from .verdict import Verdict

# FastAPI models


class RunRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = None
    language: Optional[str] = None
    test_cases: Optional[List[Any]] = Field(None, alias='testCases')
    problem_id: Optional[str] = Field(None, alias='problemId')  # source of test cases if omitted
    action: str = 'run'


class SubmissionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uid: Optional[str] = None
    problem_id: Optional[str] = Field(None, alias='problemId')
    code: Optional[str] = None
    language: Optional[str] = None
    test_cases: Optional[List[Any]] = Field(None, alias='testCases')


class TestResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    passed: bool
    input: str
    expected_output: str = Field(alias='expectedOutput')
    actual_output: Optional[str] = Field('', alias='actualOutput')
    execution_time: float = Field(0, ge=0, allow_inf_nan=False, alias='executionTime')  # milliseconds
    memory_usage: float = Field(0, ge=0, allow_inf_nan=False, alias='memoryUsage')  # bytes
    error: Optional[str] = None

    def to_test_result(self) -> 'TestResult':
        actual_output = self.actual_output or ''
        # the service's own passed flag is not trusted
        passed = not self.error and compare_outputs(self.expected_output, actual_output)
        return TestResult(
            passed=passed,
            input=self.input,
            expected_output=self.expected_output,
            actual_output=actual_output,
            execution_time=self.execution_time,
            memory_usage=self.memory_usage,
            error=self.error or None
        )


class ExecutionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    test_results: List[TestResultModel] = Field(alias='testResults')
    execution_time: Optional[float] = Field(None, ge=0, allow_inf_nan=False, alias='executionTime')
    memory_usage: Optional[float] = Field(None, ge=0, allow_inf_nan=False, alias='memoryUsage')


# Other models


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    input: str
    expected_output: str
    is_hidden: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TestCase':
        return cls(
            input=data.get('input'),
            expected_output=data.get('expectedOutput', data.get('expected_output')),
            is_hidden=data.get('isHidden', data.get('is_hidden', False))
        )

    def to_dict(self):
        return {
            "input": self.input,
            "expectedOutput": self.expected_output,
            "isHidden": self.is_hidden
        }


@dataclass(frozen=True)
class TestResult:
    __test__ = False

    passed: bool
    input: str
    expected_output: str
    actual_output: str
    execution_time: float  # milliseconds
    memory_usage: float  # bytes
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TestResult':
        return TestResultModel.model_validate(data).to_test_result()

    def to_dict(self):
        result = {
            "passed": self.passed,
            "input": self.input,
            "expectedOutput": self.expected_output,
            "actualOutput": self.actual_output,
            "executionTime": self.execution_time,
            "memoryUsage": self.memory_usage
        }
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class Submission:
    uid: str
    problem_id: str
    code: str
    language: str
    status: Verdict
    execution_time: Optional[float]
    memory_usage: Optional[float]
    test_results: List[TestResult]
    id: Optional[str] = None  # assigned by the store
    submitted_at: Optional[datetime] = None  # assigned by the store

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Submission':
        submitted_at = data.get('submittedAt')
        if isinstance(submitted_at, str):
            if submitted_at.endswith('Z'):  # fromisoformat only accepts Z from 3.11
                submitted_at = submitted_at[:-1] + '+00:00'
            submitted_at = datetime.fromisoformat(submitted_at)
        return cls(
            uid=data['uid'],
            problem_id=data['problemId'],
            code=data['code'],
            language=data['language'],
            status=Verdict(data['status']),
            execution_time=data.get('executionTime'),
            memory_usage=data.get('memoryUsage'),
            test_results=[TestResult.from_dict(r) for r in data.get('testResults', [])],
            id=data.get('id'),
            submitted_at=submitted_at
        )

    def to_dict(self):
        return {
            "id": self.id,
            "uid": self.uid,
            "problemId": self.problem_id,
            "code": self.code,
            "language": self.language,
            "status": self.status,
            "executionTime": self.execution_time,
            "memoryUsage": self.memory_usage,
            "testResults": [r.to_dict() for r in self.test_results],
            "submittedAt": self.submitted_at.isoformat() if self.submitted_at else None
        }


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class VerdictResult:
    verdict: Verdict
    details: str


@dataclass
class ExecutionStats:
    total_execution_time: float = 0
    average_execution_time: float = 0
    max_execution_time: float = 0
    total_memory_usage: float = 0
    average_memory_usage: float = 0
    max_memory_usage: float = 0

    def to_dict(self):
        return {
            "totalExecutionTime": self.total_execution_time,
            "averageExecutionTime": self.average_execution_time,
            "maxExecutionTime": self.max_execution_time,
            "totalMemoryUsage": self.total_memory_usage,
            "averageMemoryUsage": self.average_memory_usage,
            "maxMemoryUsage": self.max_memory_usage
        }


@dataclass
class SubmissionSummary:
    total_submissions: int = 0
    accepted_submissions: int = 0
    success_rate: int = 0  # percent
    language_distribution: Dict[str, int] = field(default_factory=dict)
    status_distribution: Dict[str, int] = field(default_factory=dict)
    average_execution_time: float = 0
    average_memory_usage: float = 0

    def to_dict(self):
        return {
            "totalSubmissions": self.total_submissions,
            "acceptedSubmissions": self.accepted_submissions,
            "successRate": self.success_rate,
            "languageDistribution": self.language_distribution,
            "statusDistribution": self.status_distribution,
            "averageExecutionTime": self.average_execution_time,
            "averageMemoryUsage": self.average_memory_usage
        }


@dataclass
class ExecutionResponse:
    test_results: List[TestResult]
    execution_time: Optional[float] = None
    memory_usage: Optional[float] = None


@dataclass
class RunResult:
    success: bool
    test_results: Optional[List[TestResult]] = None
    verdict: Optional[Verdict] = None
    details: Optional[str] = None
    execution_stats: Optional[ExecutionStats] = None
    execution_time: Optional[float] = None
    memory_usage: Optional[float] = None
    error: Optional[ErrorInfo] = None

    def to_dict(self):
        if not self.success:
            return {"success": False, "error": self.error.to_dict()}
        return {
            "success": True,
            "verdict": self.verdict,
            "details": self.details,
            "testResults": [r.to_dict() for r in self.test_results],
            "executionStats": self.execution_stats.to_dict(),
            "executionTime": self.execution_time,
            "memoryUsage": self.memory_usage
        }


@dataclass
class EvaluationResult:
    success: bool
    submission_id: Optional[str] = None
    verdict: Optional[Verdict] = None
    details: Optional[str] = None
    test_results: Optional[List[TestResult]] = None
    execution_stats: Optional[ExecutionStats] = None
    error: Optional[ErrorInfo] = None

    def to_dict(self):
        if not self.success:
            return {"success": False, "error": self.error.to_dict()}
        return {
            "success": True,
            "submissionId": self.submission_id,
            "verdict": self.verdict,
            "details": self.details,
            "testResults": [r.to_dict() for r in self.test_results],
            "executionStats": self.execution_stats.to_dict()
        }
