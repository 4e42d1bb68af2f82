"""Domain-specific exception classes"""


class TutorbookError(Exception):
    """Base exception for Tutorbook"""

    pass


class ConfigLoadError(TutorbookError):
    """Configuration could not be loaded (environment, fixtures, etc.)"""

    pass


class MissingCredentialsError(ConfigLoadError):
    """Credentials for the language model are not configured"""

    pass


class AnalysisError(TutorbookError):
    """Notice analysis failed (Gemini API, malformed response, etc.)"""

    pass
