"""
Survey Arrangement & Reactive Constraints (SARC) Package

Reorders the answer options of rendered survey questions and enforces
mutual-exclusion rules over live selections.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - DOM nodes, CSS or any UI toolkit
    - Branching / skip logic
    - Persistence beyond one render lifecycle

Options are addressed by stable integer codes only.
All mutation goes through the OptionStore interface.
"""

from sarc.errors import (
    ArrangementError,
    ConfigurationError,
    ConsistencyError,
    ReferenceLookupError,
    UnknownCodeError,
    UnknownQuestionError,
)
from sarc.model import NONE_OF_THE_ABOVE, Option, OptionKind, PipingMode, Question, Survey
from sarc.store import InMemoryOptionStore, OptionStore
from sarc.rotation import RotationConfig, rotate
from sarc.positioning import place_after, place_at_top, place_before
from sarc.piping import descendants, shuffle_by, sync_descendants
from sarc.exclusivity import ExclusivityEngine, set_exclusivity
from sarc.session import SurveySession

__version__ = "0.1.0"

__all__ = [
    "ArrangementError",
    "ConfigurationError",
    "ConsistencyError",
    "ReferenceLookupError",
    "UnknownCodeError",
    "UnknownQuestionError",
    "NONE_OF_THE_ABOVE",
    "Option",
    "OptionKind",
    "PipingMode",
    "Question",
    "Survey",
    "OptionStore",
    "InMemoryOptionStore",
    "RotationConfig",
    "rotate",
    "place_after",
    "place_before",
    "place_at_top",
    "descendants",
    "sync_descendants",
    "shuffle_by",
    "ExclusivityEngine",
    "set_exclusivity",
    "SurveySession",
]
