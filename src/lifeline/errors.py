"""Exceptions and warnings raised by the lifeline package."""

from typing import List, Optional


class LifelineError(Exception):
    """Base class for lifeline errors."""
    pass


class ContentFormatError(LifelineError):
    """Raised when an authored content document cannot be read at all."""
    pass


class ContentValidationError(LifelineError):
    """Raised by strict validation when the content has findings."""

    def __init__(self, findings: List[str], message: Optional[str] = None):
        self.findings = list(findings)
        if message is None:
            message = f"{len(self.findings)} content problem(s): " + "; ".join(self.findings)
        super().__init__(message)


class ContentWarning(UserWarning):
    """Emitted for a problem in a single node that does not stop loading."""
    pass
