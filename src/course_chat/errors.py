from __future__ import annotations


class CourseChatError(Exception):
    """Base class for every error raised by the course chat service."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StartupConfigError(CourseChatError):
    """Configuration is missing or invalid; the service must not start."""


class DataSourceError(CourseChatError):
    """The course catalog could not be queried."""


class UpstreamError(CourseChatError):
    """The remote language-model API failed or returned an unusable reply."""


class QuestionValidationError(CourseChatError):
    """The incoming question is missing or blank."""


class CourseDecodeError(CourseChatError):
    """A catalog record does not match the course schema."""
