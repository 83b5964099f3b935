"""Exceptions raised for programmer-contract violations.

Data-quality problems (dangling ids, asymmetric links, bad gender values...)
are never raised; they are reported as findings by `validation.validate`.
"""


class NotFound(KeyError):
    """Raised when an id that must exist is absent from the store."""

    def __init__(self, pid: str, what: str = "Person") -> None:
        super().__init__(pid)
        self.pid = pid
        self.what = what

    def __str__(self) -> str:
        return f"{self.what} {self.pid} not found"
