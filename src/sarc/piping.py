"""
Piping Graph & Synchronisation Engine.

A question is "piped" when its option set is derived from a parent
question (Question.piping_parent). The relation forms a directed graph:

    parent -> child   whenever child.piping_parent == parent.id

Two synchronisation operations keep piped questions visually consistent
with a base question that was rotated:

    sync_descendants(base)    every transitive descendant follows the base's
                              surviving order (fixed / sentinel codes excluded)
    shuffle_by(base, target)  strict one-to-one copy; every non-sentinel
                              target code must exist in the base

Piping relations are author-declared and may contain cycles or diamonds.
Traversal visits each question at most once and never reports a cycle as
an error.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sarc.errors import ArrangementError, ConfigurationError, ConsistencyError
from sarc.model import NONE_OF_THE_ABOVE, Option
from sarc.store import OptionStore

logger = logging.getLogger(__name__)


def _require_question_id(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"Please set `{name}` as a number")
    return value


def _children_by_parent(store: OptionStore) -> Dict[Optional[int], List[int]]:
    children: Dict[Optional[int], List[int]] = {}
    for question_id in store.question_ids():
        children.setdefault(store.piping_parent(question_id), []).append(question_id)
    return children


def piping_children(store: OptionStore, question_id: int) -> List[int]:
    """Questions whose piping parent is question_id, in questionnaire order."""
    return _children_by_parent(store).get(question_id, [])


def descendants(store: OptionStore, base_id: int) -> List[int]:
    """
    All questions transitively piped from base_id.

    Depth-first, pre-order. Each question appears once; the base itself
    is never part of the result, even when a cycle leads back to it.
    Walks an explicit stack, so chain length is not bounded by the
    interpreter's recursion limit.
    """
    children = _children_by_parent(store)
    visited = {base_id}
    result: List[int] = []
    stack = list(reversed(children.get(base_id, [])))
    while stack:
        node = stack.pop()
        if node in visited:
            continue
        visited.add(node)
        result.append(node)
        stack.extend(reversed(children.get(node, [])))
    return result


def surviving_order(store: OptionStore, question_id: int) -> List[int]:
    """Codes of the question in rendered order, fixed and sentinel options excluded."""
    return [option.code for option in store.get_options(question_id) if not option.is_fixed]


def follow_order(options: Sequence[Option], reference: Sequence[int]) -> List[int]:
    """
    Reorder options to follow a reference order.

    Normal codes shared with the reference come first, in reference order.
    Normal codes absent from the reference keep their relative order after
    them. Fixed options close the list unchanged.
    """
    normal = [option.code for option in options if not option.is_fixed]
    fixed = [option.code for option in options if option.is_fixed]
    normal_set = set(normal)
    reference_set = set(reference)
    matched = [code for code in reference if code in normal_set]
    unmatched = [code for code in normal if code not in reference_set]
    return matched + unmatched + fixed


def plan_descendant_sync(
    store: OptionStore,
    base_id: int,
    exclude_ids: Iterable[int] = (),
) -> Dict[int, List[int]]:
    """
    New order per descendant, without applying anything.

    Excluded descendants keep their own (e.g. independently randomised)
    order and are left out of the plan.
    """
    excluded = set(exclude_ids)
    reference = surviving_order(store, base_id)
    plan: Dict[int, List[int]] = {}
    for question_id in descendants(store, base_id):
        if question_id in excluded:
            logger.info("Q%s > Random Rotation", question_id)
            continue
        plan[question_id] = follow_order(store.get_options(question_id), reference)
    return plan


def sync_descendants(store: OptionStore, base_id: int, exclude_ids: Sequence[int] = ()) -> bool:
    """
    Make every piped descendant of base_id follow its surviving order.

    All-or-nothing: every descendant's order is computed before any is
    applied, so a failure leaves all of them untouched.

    Args:
        store: Option store
        base_id: Question whose order is propagated
        exclude_ids: Descendants to skip

    Returns:
        Always True. Failures are logged.
    """
    try:
        _require_question_id(base_id, "setRotationBase")
        if not isinstance(exclude_ids, (list, tuple, set, frozenset)):
            raise ConfigurationError("Please set `excludeNumbers` as an array")
        for question_id in exclude_ids:
            _require_question_id(question_id, "excludeNumbers")

        plan = plan_descendant_sync(store, base_id, exclude_ids)
        for question_id, new_order in plan.items():
            logger.debug("Q%s follows Q%s: %s", question_id, base_id, new_order)
            store.reorder(question_id, new_order)
    except ArrangementError as e:
        logger.error("Synchronising descendants of Q%s failed: %s", base_id, e)
    return True


def shuffle_by(store: OptionStore, base_id: int, target_id: int) -> bool:
    """
    Copy the base question's order onto the target question, one to one.

    Every target code except the sentinel must exist in the base. The
    target's fixed / sentinel options are appended unchanged at the end.

    Returns:
        True. Configuration and lookup failures are logged.

    Raises:
        ConsistencyError: target holds codes absent from the base.
            The target's order is left untouched.
    """
    try:
        _require_question_id(base_id, "baseQid")
        _require_question_id(target_id, "qnum")

        base_order = store.codes(base_id)
        target_options = store.get_options(target_id)

        base_set = set(base_order)
        mismatched = [
            option.code
            for option in target_options
            if option.code not in base_set and option.code != NONE_OF_THE_ABOVE
        ]
        if mismatched:
            raise ConsistencyError(base_id, target_id, mismatched)

        normal = {option.code for option in target_options if not option.is_fixed}
        matched = [code for code in base_order if code in normal]
        tail = [option.code for option in target_options if option.is_fixed]
        store.reorder(target_id, matched + tail)
    except ConsistencyError:
        logger.error("shuffle_by Q%s -> Q%s: mismatched answers", base_id, target_id)
        raise
    except ArrangementError as e:
        logger.error("shuffle_by Q%s -> Q%s failed: %s", base_id, target_id, e)
    return True
