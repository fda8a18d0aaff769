from enum import Enum


class Verdict(str, Enum):
    AC = 'Accepted'
    WA = 'Wrong Answer'
    TLE = 'Time Limit Exceeded'
    RE = 'Runtime Error'
    CE = 'Compilation Error'
