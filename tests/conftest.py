import pytest

from grader.models import TestCase, TestResult


@pytest.fixture
def square_test_cases():
    return [
        TestCase(input='5', expected_output='25', is_hidden=False),
        TestCase(input='3', expected_output='9', is_hidden=False),
        TestCase(input='7', expected_output='49', is_hidden=True),
    ]


@pytest.fixture
def square_results():
    return [
        TestResult(True, '5', '25', '25', 100, 1024),
        TestResult(True, '3', '9', '9', 120, 1536),
        TestResult(True, '7', '49', '49', 110, 1280),
    ]
