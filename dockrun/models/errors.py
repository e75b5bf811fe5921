"""Error models and exception classes for dockrun."""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration."""

    VALIDATION = "validation"
    IMAGE_NOT_FOUND = "image_not_found"
    CONTAINER_EXIT = "container_exit"
    CLEANUP_FAILED = "cleanup_failed"


class DockrunException(Exception):
    """Base exception for dockrun."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a structured log payload."""
        return {
            "error": self.message,
            "error_type": self.error_type.value,
            **self.details,
        }


class ValidationError(DockrunException):
    """Container specification is incomplete or malformed."""

    def __init__(self, message: str = "Invalid container specification", **kwargs):
        super().__init__(message=message, error_type=ErrorType.VALIDATION, **kwargs)


class ImageNotFoundError(DockrunException):
    """Image is not present in the engine."""

    def __init__(self, image: str, **kwargs):
        self.image = image
        super().__init__(
            message=f"Docker image not found: {image}",
            error_type=ErrorType.IMAGE_NOT_FOUND,
            details={"image": image},
            **kwargs,
        )


class ContainerExitError(DockrunException):
    """Container process terminated with a non-zero exit code."""

    def __init__(self, exit_code: int, container_id: Optional[str] = None, **kwargs):
        self.exit_code = exit_code
        self.container_id = container_id
        super().__init__(
            message=f"container exited with error code: {exit_code}",
            error_type=ErrorType.CONTAINER_EXIT,
            details={"exit_code": exit_code, "container_id": container_id},
            **kwargs,
        )


class CleanupError(DockrunException):
    """One or more teardown steps failed.

    Every step of a teardown is attempted regardless of earlier failures;
    ``errors`` holds each failure in the order the steps ran.
    """

    def __init__(self, errors: List[Exception], container_id: Optional[str] = None, **kwargs):
        self.errors = list(errors)
        self.container_id = container_id
        summary = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(
            message=f"{len(self.errors)} error(s) occurred during cleanup: {summary}",
            error_type=ErrorType.CLEANUP_FAILED,
            details={"container_id": container_id, "error_count": len(self.errors)},
            **kwargs,
        )

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)
