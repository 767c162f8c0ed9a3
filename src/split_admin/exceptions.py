"""split_admin exceptions."""

from __future__ import annotations

from typing import Any


class SplitAdminError(Exception):
    """Base split_admin error."""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class SplitAdminErrorCodes:
    """Error code constants for SplitAdminError."""

    DEADLINE_EXCEEDED: str = "DEADLINE_EXCEEDED"
    NOT_FOUND: str = "NOT_FOUND"
    HTTP_ERROR: str = "HTTP_ERROR"
    TRANSPORT_ERROR: str = "TRANSPORT_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"
    DEFAULT_RULE_SIZE_MISMATCH: str = "DEFAULT_RULE_SIZE_MISMATCH"
    RULE_SIZE_MISMATCH: str = "RULE_SIZE_MISMATCH"
    INVALID_CONFIGURATIONS: str = "INVALID_CONFIGURATIONS"
    DUPLICATE_TREATMENT: str = "DUPLICATE_TREATMENT"
    UNKNOWN_TREATMENT: str = "UNKNOWN_TREATMENT"
    UNKNOWN_MATCHER_TYPE: str = "UNKNOWN_MATCHER_TYPE"
    MATCHER_FIELD_MISMATCH: str = "MATCHER_FIELD_MISMATCH"
    INVALID_COMPOSITE_ID: str = "INVALID_COMPOSITE_ID"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    CONFIG_VALIDATION: str = "CONFIG_VALIDATION_ERROR"


class DeadlineExceededError(SplitAdminError):
    """Raised when the client-wide deadline has elapsed."""

    def __init__(self, method: str, path: str) -> None:
        self.method = method
        self.path = path
        super().__init__(
            code=SplitAdminErrorCodes.DEADLINE_EXCEEDED,
            message=f"reached maximum client timeout before {method} {path}",
        )


class NotFoundError(SplitAdminError):
    """Raised when a linear-scan lookup finds no matching item."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(
            code=SplitAdminErrorCodes.NOT_FOUND,
            message=f"{kind} [{key}] not found",
        )


class DefinitionValidationError(SplitAdminError):
    """A rollout definition failed local validation before any request was sent."""

    def __init__(self, message: str, code: str = SplitAdminErrorCodes.VALIDATION) -> None:
        super().__init__(code=code, message=message)


class SplitApiError(SplitAdminError):
    """The remote API answered with an error status, or the transport failed."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        response: Any = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(code=code, message=message, cause=cause)
        self.status_code = status_code
        self.response = response

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ConfigError(SplitAdminError):
    """Client configuration could not be read or validated."""


class InvalidCompositeIdError(SplitAdminError):
    """An import identifier does not have the expected number of parts."""

    def __init__(self, composite_id: str, parts: int) -> None:
        self.composite_id = composite_id
        self.parts = parts
        super().__init__(
            code=SplitAdminErrorCodes.INVALID_COMPOSITE_ID,
            message=(
                f"import composite ID [{composite_id}] requires {parts} parts "
                "separated by a colon (x:y)"
            ),
        )
