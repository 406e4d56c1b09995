"""
Exceptions raised while generating schemas.
"""


class SchemaGenerationError(Exception):
    """Base class for errors raised by the schema generator."""

    pass


class UnsupportedTypeError(SchemaGenerationError):
    """Raised when a type cannot be represented.

    This can happen when:
    - A type variable has no binding in the current generic context
    - Annotations refer to names that cannot be resolved
    - A typing construct has no schema counterpart (e.g. Callable)

    The generation context catches this per member and leaves the member's
    schema unpopulated.
    """

    pass


class CircularReferenceError(SchemaGenerationError):
    """Raised when inlining all schemas meets a type that refers back to itself."""

    pass


class DuplicateDefinitionNameError(SchemaGenerationError):
    """Raised when the naming strategy leaves two definitions with the same name."""

    pass
