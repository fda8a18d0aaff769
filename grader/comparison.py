from typing import List


def normalize_output(output: str) -> List[str]:
    output = output.replace('\r\n', '\n').replace('\r', '\n')
    lines = [line.strip() for line in output.split('\n')]
    while lines and not lines[-1]:  # trailing newlines leave empty lines behind
        lines.pop()
    return lines


def compare_outputs(expected: str, actual: str, strict: bool = False) -> bool:
    """Decides whether ``actual`` matches ``expected`` for a single test case.

    The default comparison is line based and ignores leading/trailing
    whitespace on every line as well as trailing blank lines. ``strict``
    compares the raw strings. There is no tolerance for floating point
    answers; such problems must fix the output format instead.
    """
    if strict:
        return expected == actual
    return normalize_output(expected) == normalize_output(actual)
