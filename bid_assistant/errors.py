"""
Error Types

Every failure surfaced to a caller carries an HTTP-style status code and a
short message. Subclasses of RuntimeError so existing callers that catch
RuntimeError keep working.
"""


class ProjectChatError(RuntimeError):
    """Base class for failures of a project chat request."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(ProjectChatError):
    """The request payload is missing required fields or is malformed."""

    status_code = 400


class ConfigurationError(ProjectChatError):
    """A required collaborator is not configured."""

    status_code = 500


class DataUnavailableError(ProjectChatError):
    """The project database could not be read."""

    status_code = 500


class ProjectNotFoundError(DataUnavailableError):
    """No project exists with the requested identifier."""

    status_code = 404

    def __init__(self, project_id: str):
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class GenerationError(ProjectChatError):
    """The text-generation service failed."""

    status_code = 500
