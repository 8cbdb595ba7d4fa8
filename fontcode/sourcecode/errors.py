"""Source code generation errors.

Every failure of a single generation is a ``CodegenError``; the scheduler
delivers it as that request's result and keeps serving later requests.
"""


class CodegenError(Exception):
    """Raised when source code generation fails due to invalid input."""

    pass


class InvalidArrayName(CodegenError):
    """Array name is not a valid identifier in the target format."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid array name {name!r}: {reason}")
        self.name = name
        self.reason = reason


class InvalidOptions(CodegenError):
    """Source code options are malformed (e.g. zero-space indentation)."""

    pass
