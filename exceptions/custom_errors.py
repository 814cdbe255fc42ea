class SatDriverError(Exception):
    """Base class for every error raised by the constraint orchestration layer."""

    pass


class DuplicateNameError(SatDriverError):
    """Raised when a variable name or coordinate key is declared twice in the same registry."""

    pass


class VariableNotFoundError(SatDriverError):
    """Raised when a variable is looked up by a name or key that was never declared."""

    pass


class InvalidDomainError(SatDriverError, ValueError):
    """Raised when a bounded integer domain is built with a lower bound above its upper bound."""

    pass


class MalformedConstraintError(SatDriverError, TypeError):
    """Raised when a non-boolean expression, or one over foreign variables, is asserted."""

    pass


class UnbalancedStackError(SatDriverError):
    """Raised when more checkpoints are popped than have been pushed."""

    pass


class NoModelAvailableError(SatDriverError):
    """Raised when a model is requested without a preceding satisfiable check."""

    pass


class UnboundVariableError(SatDriverError):
    """Raised when the solver returned no concrete value for a variable."""

    pass


class OutOfDomainError(SatDriverError):
    """Raised when the solver returned a value outside the variable's declared domain."""

    pass


class OracleError(SatDriverError):
    """Raised when the external solver rejects the compiled model as invalid."""

    pass


class InputMismatchError(SatDriverError, ValueError):
    """Raised when problem tables (adjacency, siblings, zones) are inconsistent with each other."""

    pass


class FileReadingError(SatDriverError):
    """Raised when there is an error reading a problem file."""

    pass


class FileContentError(SatDriverError):
    """Raised when the content of a problem file is not as expected."""

    pass


# Mapping of custom exceptions to their error category
ERROR_CATEGORIES = {
    DuplicateNameError: "construction",
    VariableNotFoundError: "construction",
    InvalidDomainError: "construction",
    InputMismatchError: "construction",
    FileReadingError: "construction",
    FileContentError: "construction",
    MalformedConstraintError: "session misuse",
    UnbalancedStackError: "session misuse",
    NoModelAvailableError: "session misuse",
    UnboundVariableError: "oracle contract",
    OutOfDomainError: "oracle contract",
    OracleError: "oracle contract",
}


def error_category(exc: BaseException) -> str:
    """Return the taxonomy category of an exception, or 'unexpected' for foreign errors."""
    for cls in type(exc).__mro__:
        if cls in ERROR_CATEGORIES:
            return ERROR_CATEGORIES[cls]
    return "unexpected"
