"""
Option Store interface and in-memory implementation.

The engine never touches rendered markup directly. Everything it reads
or mutates goes through an OptionStore, keyed by question id and option
code (never by position), so identities stay stable across reorders.

InMemoryOptionStore backs the interface with a Survey model. It is what
the tests use, and what a host application can wrap around its own
rendered state.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Sequence

from sarc.errors import ConfigurationError, UnknownCodeError, UnknownQuestionError
from sarc.model import Option, Question, Survey

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[int, int], None]


class OptionStore(ABC):
    """
    Interface consumed by every engine component.

    All methods take an explicit question id. Codes are integers.
    """

    @abstractmethod
    def get_options(self, question_id: int) -> List[Option]:
        """Options of a question in rendered order."""

    @abstractmethod
    def reorder(self, question_id: int, new_order: Sequence[int]) -> None:
        """Replace the rendered order. new_order must be a permutation of the current codes."""

    @abstractmethod
    def insert_before(self, question_id: int, code: int, anchor_code: int) -> None:
        pass

    @abstractmethod
    def insert_after(self, question_id: int, code: int, anchor_code: int) -> None:
        pass

    @abstractmethod
    def insert_at_front(self, question_id: int, code: int) -> None:
        pass

    @abstractmethod
    def set_read_only(self, question_id: int, code: int, flag: bool) -> None:
        pass

    @abstractmethod
    def set_visual_disabled(self, question_id: int, code: int, flag: bool) -> None:
        pass

    @abstractmethod
    def set_checked(self, question_id: int, code: int, flag: bool) -> None:
        """Programmatic selection change. Must not emit change events."""

    @abstractmethod
    def is_checked(self, question_id: int, code: int) -> bool:
        pass

    @abstractmethod
    def set_hidden(self, question_id: int, code: int, flag: bool) -> None:
        pass

    @abstractmethod
    def piping_parent(self, question_id: int) -> Optional[int]:
        pass

    @abstractmethod
    def question_ids(self) -> List[int]:
        """All rendered question ids, in questionnaire order."""

    @abstractmethod
    def subscribe(self, question_id: int, handler: ChangeHandler) -> None:
        """Register a selection-changed handler scoped to one question."""

    @abstractmethod
    def unsubscribe(self, question_id: int, handler: ChangeHandler) -> None:
        pass

    def codes(self, question_id: int) -> List[int]:
        """Codes in rendered order."""
        return [option.code for option in self.get_options(question_id)]


class InMemoryOptionStore(OptionStore):
    """
    OptionStore over a Survey object.

    Mutates the Question.options lists in place. Change events are only
    emitted by select(), which stands in for a user interaction.
    """

    def __init__(self, survey: Survey):
        self.survey = survey
        self._handlers: Dict[int, List[ChangeHandler]] = defaultdict(list)

    def _question(self, question_id: int) -> Question:
        question = self.survey.get_question(question_id)
        if question is None:
            raise UnknownQuestionError(question_id)
        return question

    def _option(self, question_id: int, code: int) -> Option:
        option = self._question(question_id).get_option(code)
        if option is None:
            raise UnknownCodeError(question_id, code)
        return option

    def _detach(self, question: Question, code: int) -> Option:
        option = question.get_option(code)
        if option is None:
            raise UnknownCodeError(question.id, code)
        question.options.remove(option)
        return option

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def get_options(self, question_id: int) -> List[Option]:
        return list(self._question(question_id).options)

    def reorder(self, question_id: int, new_order: Sequence[int]) -> None:
        question = self._question(question_id)
        current = question.codes()
        if sorted(new_order) != sorted(current):
            raise ConfigurationError(
                f"New order {list(new_order)} for Q{question_id} is not a permutation of {current}"
            )
        by_code = {option.code: option for option in question.options}
        question.options[:] = [by_code[code] for code in new_order]

    def insert_before(self, question_id: int, code: int, anchor_code: int) -> None:
        question = self._question(question_id)
        self._option(question_id, anchor_code)
        if code == anchor_code:
            return
        option = self._detach(question, code)
        index = question.codes().index(anchor_code)
        question.options.insert(index, option)

    def insert_after(self, question_id: int, code: int, anchor_code: int) -> None:
        question = self._question(question_id)
        self._option(question_id, anchor_code)
        if code == anchor_code:
            return
        option = self._detach(question, code)
        index = question.codes().index(anchor_code)
        question.options.insert(index + 1, option)

    def insert_at_front(self, question_id: int, code: int) -> None:
        question = self._question(question_id)
        option = self._detach(question, code)
        question.options.insert(0, option)

    # ------------------------------------------------------------------
    # Input state
    # ------------------------------------------------------------------

    def set_read_only(self, question_id: int, code: int, flag: bool) -> None:
        self._option(question_id, code).read_only = flag

    def set_visual_disabled(self, question_id: int, code: int, flag: bool) -> None:
        self._option(question_id, code).visually_disabled = flag

    def set_checked(self, question_id: int, code: int, flag: bool) -> None:
        self._option(question_id, code).checked = flag

    def is_checked(self, question_id: int, code: int) -> bool:
        return self._option(question_id, code).checked

    def set_hidden(self, question_id: int, code: int, flag: bool) -> None:
        self._option(question_id, code).hidden = flag

    # ------------------------------------------------------------------
    # Metadata and events
    # ------------------------------------------------------------------

    def piping_parent(self, question_id: int) -> Optional[int]:
        return self._question(question_id).piping_parent

    def question_ids(self) -> List[int]:
        return self.survey.question_ids()

    def subscribe(self, question_id: int, handler: ChangeHandler) -> None:
        self._question(question_id)
        self._handlers[question_id].append(handler)

    def unsubscribe(self, question_id: int, handler: ChangeHandler) -> None:
        handlers = self._handlers.get(question_id, [])
        if handler in handlers:
            handlers.remove(handler)

    def subscriber_count(self, question_id: int) -> int:
        return len(self._handlers.get(question_id, []))

    def select(self, question_id: int, code: int, checked: bool = True) -> None:
        """
        Simulate a user toggling an option.

        Read-only state is advisory and does not block the change.
        Every subscriber of the question runs to completion, one after
        another, before this call returns.
        """
        self._option(question_id, code).checked = checked
        logger.debug("Q%s option %s checked=%s", question_id, code, checked)
        for handler in list(self._handlers.get(question_id, [])):
            handler(question_id, code)
