"""Error types for the operation hooks engine.

Build-time errors (RegistrationLockedError, ConfigurationError,
ValidationError) abort the schema build. LogicError and OperationError
are raised per resolver invocation and surface as GraphQL errors.
"""

from typing import Any


class OperationHooksError(Exception):
    """Base class for all operation hook errors."""
    pass


class RegistrationLockedError(OperationHooksError):
    """An operation hook was registered after hooks started being applied."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Attempted to register operation hook after a hook was applied; "
            "this indicates an issue with the ordering of your plugins. "
            "Ensure that the operation hooks plugin and anything that depends "
            "on it come at the end of the plugins list."
        )


class LogicError(OperationHooksError):
    """An operation hook returned no value."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message or "Logic error: operation hook returned an undefined value (None)."
        )


class ConfigurationError(OperationHooksError):
    """A hook-bearing root field has no resolver to wrap."""

    def __init__(self, type_name: str, field_name: str):
        self.type_name = type_name
        self.field_name = field_name
        super().__init__(
            f"Default resolver found for field {type_name}.{field_name}; "
            "default resolvers at the root level are not supported by operation hooks"
        )


class ValidationError(OperationHooksError):
    """One or more root fields were not wrapped by the operation hooks."""

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(
            "Schema validation error: operation hooks were not added to the "
            f"following fields: {', '.join(self.fields)}"
        )


class OperationError(OperationHooksError):
    """A user-visible failure of a root operation.

    Attributes:
        extensions: Extra data copied onto the resulting GraphQLError
    """

    def __init__(self, message: str, extensions: dict[str, Any] | None = None):
        self.extensions = dict(extensions or {})
        super().__init__(message)
