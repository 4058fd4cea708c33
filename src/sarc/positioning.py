"""
Positioning Primitives — relative moves of option codes.

    place_after(base, [a, b])  ->  ... base a b ...
    place_before(base, [a, b]) ->  ... a b base ...
    place_at_top([a, b])       ->  a b ...

Each code is moved with one single-item insert. place_after walks the
codes in reverse (each insert lands directly behind the base and pushes
the previous one further right); place_before and place_at_top keep the
caller's left-to-right order the same way.

After every call fixed options are settled back at the end.
"""

from __future__ import annotations

import logging
from typing import Any, List

from sarc.errors import ArrangementError, ConfigurationError, UnknownCodeError
from sarc.helpers import as_code_list, settle_fixed
from sarc.store import OptionStore

logger = logging.getLogger(__name__)


def _move_relative(store: OptionStore, question_id: int, base_code: Any, codes: Any, after: bool) -> None:
    if base_code is None:
        raise ConfigurationError("baseCode is required")
    if isinstance(base_code, bool) or not isinstance(base_code, int):
        raise ConfigurationError(f"baseCode must be an integer code, got {base_code!r}")
    codes = as_code_list(codes)

    present = set(store.codes(question_id))
    if base_code not in present:
        raise UnknownCodeError(question_id, base_code)

    ordered: List[int] = list(reversed(codes)) if after else codes
    for code in ordered:
        if code == base_code:
            logger.warning("Q%s: option %s cannot be placed relative to itself", question_id, code)
            continue
        if code not in present:
            logger.warning("Q%s: option with rank %s not found", question_id, code)
            continue
        if after:
            store.insert_after(question_id, code, base_code)
        else:
            store.insert_before(question_id, code, base_code)

    settle_fixed(store, question_id)


def place_after(store: OptionStore, question_id: int, base_code: int, codes) -> bool:
    """
    Move codes to sit immediately after base_code, in the given order.

    Missing codes are skipped with a warning. A missing base code fails
    the whole call (logged). Always returns True.
    """
    try:
        _move_relative(store, question_id, base_code, codes, after=True)
    except ArrangementError as e:
        logger.error("place_after on Q%s failed: %s", question_id, e)
    return True


def place_before(store: OptionStore, question_id: int, base_code: int, codes) -> bool:
    """Move codes to sit immediately before base_code, in the given order."""
    try:
        _move_relative(store, question_id, base_code, codes, after=False)
    except ArrangementError as e:
        logger.error("place_before on Q%s failed: %s", question_id, e)
    return True


def place_at_top(store: OptionStore, question_id: int, codes) -> bool:
    """Move codes to the front of the question, in the given order."""
    try:
        codes = as_code_list(codes)
        present = set(store.codes(question_id))
        for code in reversed(codes):
            if code not in present:
                logger.warning("Q%s: option with rank %s not found", question_id, code)
                continue
            store.insert_at_front(question_id, code)
        settle_fixed(store, question_id)
    except ArrangementError as e:
        logger.error("place_at_top on Q%s failed: %s", question_id, e)
    return True
