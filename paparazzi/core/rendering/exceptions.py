"""
Render Exceptions
=================

Request-local failures of the render pipeline. Each kind carries the HTTP
status and error code the API reports for it.
"""

from typing import Optional


class RenderError(Exception):
    """Base class for render pipeline failures."""

    status_code = 500
    error_code = "RENDER_ERROR"
    user_message = "Rendering failed due to an internal error."


class InvalidParameter(RenderError):
    """A query parameter was rejected."""

    status_code = 400
    error_code = "INVALID_PARAMETER"

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return str(self)


class MissingQuery(InvalidParameter):
    """The request carried no query string at all."""

    error_code = "MISSING_QUERY"


class RenderFailed(RenderError):
    """The renderer could not be started or exited unsuccessfully."""

    status_code = 502
    error_code = "RENDER_FAILED"
    user_message = "The renderer failed to produce an image."

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    @property
    def signal(self) -> Optional[int]:
        """Signal number when the renderer was killed by a signal."""
        if self.returncode is not None and self.returncode < 0:
            return -self.returncode
        return None


class RenderTimeout(RenderError):
    """The renderer ran past the render timeout and was killed."""

    status_code = 504
    error_code = "RENDER_TIMEOUT"
    user_message = "Rendering timed out."

    def __init__(self, message: str, timeout: float):
        super().__init__(message)
        self.timeout = timeout


class ArtifactMissing(RenderError):
    """The renderer finished but left no usable output file."""

    status_code = 502
    error_code = "ARTIFACT_MISSING"
    user_message = "The renderer did not produce an image."


class ServerBusy(RenderError):
    """Render capacity is exhausted."""

    status_code = 503
    error_code = "SERVER_BUSY"
    user_message = "All render slots are busy. Please try again in a moment."


class ClientDisconnected(RenderError):
    """The client went away before the render finished."""

    status_code = 499
    error_code = "CLIENT_CLOSED_REQUEST"
    user_message = "Client closed the request."
