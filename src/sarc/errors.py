"""
Error taxonomy for the arrangement and constraint engine.

    ConfigurationError   - malformed group / code arguments
    ReferenceLookupError - a referenced question or code does not exist
    ConsistencyError     - strict synchronisation found unmatched codes

Cyclic piping relations are NOT errors. Traversal guards against them.
"""

from typing import Iterable, List


class ArrangementError(Exception):
    """Base class for every error raised by this package."""
    pass


class ConfigurationError(ArrangementError):
    """Raised when an operation receives malformed arguments."""
    pass


class ReferenceLookupError(ArrangementError):
    """Raised when a question or option code cannot be found."""
    pass


class UnknownQuestionError(ReferenceLookupError):
    def __init__(self, question_id):
        self.question_id = question_id
        super().__init__(f"Question {question_id!r} is not found")


class UnknownCodeError(ReferenceLookupError):
    def __init__(self, question_id, code):
        self.question_id = question_id
        self.code = code
        super().__init__(f"Option with code {code!r} is not found in Q{question_id}")


class ConsistencyError(ArrangementError):
    """
    Raised by strict one-to-one synchronisation.

    The target question holds codes that the base question does not,
    so matching option identities by code would be lossy.

    Properties:
        codes: The offending target codes, in target order
    """

    def __init__(self, base_id, target_id, codes: Iterable[int]):
        self.base_id = base_id
        self.target_id = target_id
        self.codes: List[int] = list(codes)
        listing = ", ".join(str(c) for c in self.codes)
        super().__init__(
            f"There are mismatched answers between Q{base_id} and Q{target_id}: {listing}"
        )
