import pytest
from helper import make_result

from grader.models import Submission
from grader.stats import create_submission_summary, get_execution_stats
from grader.verdict import Verdict


def test_empty_results_are_zero():
    stats = get_execution_stats([])
    assert stats.to_dict() == {
        'totalExecutionTime': 0,
        'averageExecutionTime': 0,
        'maxExecutionTime': 0,
        'totalMemoryUsage': 0,
        'averageMemoryUsage': 0,
        'maxMemoryUsage': 0,
    }


def test_execution_stats(square_results):
    stats = get_execution_stats(square_results)
    assert stats.total_execution_time == 330
    assert stats.average_execution_time == 110
    assert stats.max_execution_time == 120
    assert stats.total_memory_usage == 3840
    assert stats.average_memory_usage == pytest.approx(1280)
    assert stats.max_memory_usage == 1536


def test_failed_cases_count():
    results = [make_result(execution_time=10), make_result(passed=False, error='boom', execution_time=30)]
    stats = get_execution_stats(results)
    assert stats.total_execution_time == 40
    assert stats.average_execution_time == 20
    assert stats.max_execution_time == 30


def _submission(status, language='Python', execution_time=100.0, memory_usage=1024.0):
    return Submission(uid='u1', problem_id='p1', code='print(1)', language=language, status=status,
                      execution_time=execution_time, memory_usage=memory_usage,
                      test_results=[make_result()])


def test_empty_summary():
    assert create_submission_summary([]).to_dict() == {
        'totalSubmissions': 0,
        'acceptedSubmissions': 0,
        'successRate': 0,
        'languageDistribution': {},
        'statusDistribution': {},
        'averageExecutionTime': 0,
        'averageMemoryUsage': 0,
    }


def test_summary():
    submissions = [
        _submission(Verdict.AC, execution_time=100, memory_usage=1000),
        _submission(Verdict.WA, language='C++', execution_time=200, memory_usage=3000),
        _submission(Verdict.AC, execution_time=None, memory_usage=None),
    ]
    summary = create_submission_summary(submissions)
    assert summary.total_submissions == 3
    assert summary.accepted_submissions == 2
    assert summary.success_rate == 67
    assert summary.language_distribution == {'Python': 2, 'C++': 1}
    assert summary.status_distribution == {'Accepted': 2, 'Wrong Answer': 1}
    assert summary.average_execution_time == 150
    assert summary.average_memory_usage == 2000


def test_success_rate_half_rounds_up():
    submissions = [_submission(Verdict.AC)] + [_submission(Verdict.WA)] * 7
    assert create_submission_summary(submissions).success_rate == 13  # 12.5%


def test_summary_from_stored_dicts():
    stored = _submission(Verdict.TLE).to_dict()
    summary = create_submission_summary([stored])
    assert summary.status_distribution == {'Time Limit Exceeded': 1}
    assert summary.success_rate == 0
