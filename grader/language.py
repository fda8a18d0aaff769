from enum import Enum


class Language(str, Enum):
    python = 'Python'
    javascript = 'JavaScript'
    java = 'Java'
    cpp = 'C++'
    c = 'C'


SUPPORTED_LANGUAGES = [language.value for language in Language]
