"""
Core Survey Model Objects

Defines the data structures the arrangement engine operates on.

These are plain data classes representing:
    - Options (answer choices, identified by stable codes)
    - Questions (ordered option lists plus piping metadata)
    - Surveys (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering or UI toolkits
        - Identify options by code, never by position
        - Are fully serializable
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


NONE_OF_THE_ABOVE = -1


class OptionKind(Enum):
    """
    Whether an option takes part in reordering.

    FIXED options ("other / etc" answers) are always kept after every
    NORMAL option, whatever operation runs.
    """

    NORMAL = "normal"
    FIXED = "fixed"


class PipingMode(Enum):
    """
    How a piped question derives its options from its parent.

        INCLUDE: options answered in the parent survive
        EXCLUDE: options NOT answered in the parent survive
    """

    NONE = "none"
    INCLUDE = "include"
    EXCLUDE = "exclude"


@dataclass
class Option:
    """
    A single answer option of a question.

    Properties:
        code:
            Stable integer identity (the option's rank in the questionnaire).
            Survives re-rendering and reordering.

        label:
            Human-readable text

        kind:
            OptionKind.NORMAL or OptionKind.FIXED

        checked / read_only / visually_disabled / hidden:
            Live input state owned by the option store

    IMPORTANT:
        The sentinel code -1 ("none of the above") is treated as fixed
        regardless of its declared kind.
    """

    code: int
    label: str = ""
    kind: OptionKind = OptionKind.NORMAL
    checked: bool = False
    read_only: bool = False
    visually_disabled: bool = False
    hidden: bool = False

    @property
    def is_fixed(self) -> bool:
        return self.kind is OptionKind.FIXED or self.code == NONE_OF_THE_ABOVE


@dataclass
class Question:
    """
    A rendered survey question.

    Properties:
        id:
            Integer question number (Q1, Q2, ...)

        text:
            Question text

        options:
            Options in their current rendered order.
            This list is mutated by the engine.

        piping_parent:
            Question id this question derives its options from, if any

        piping_mode:
            PipingMode of the derivation
    """

    id: int
    text: str = ""
    options: List[Option] = field(default_factory=list)
    piping_parent: Optional[int] = None
    piping_mode: PipingMode = PipingMode.NONE

    def codes(self) -> List[int]:
        """Codes in rendered order."""
        return [option.code for option in self.options]

    def get_option(self, code: int) -> Optional[Option]:
        for option in self.options:
            if option.code == code:
                return option
        return None


@dataclass
class Survey:
    """
    Root container for the rendered questions of one survey.

    Properties:
        name: Survey identifier
        questions: Questions in questionnaire order
        metadata: Arbitrary key-value pairs (use sparingly)

    INVARIANTS:
        - Question ids are unique
        - Option codes are unique within a question
    """

    name: str
    questions: List[Question] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def get_question(self, question_id: int) -> Optional[Question]:
        """
        Retrieve a question by id.

        Args:
            question_id: Question number

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def question_ids(self) -> List[int]:
        return [question.id for question in self.questions]
