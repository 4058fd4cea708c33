"""
Conditional visibility and advisory disabling of options.

    hide(codes, cond)     hidden when cond is true, shown otherwise
    show(codes, cond)     the mirror of hide
    disable(codes, cond)  read-only + visual disabled when cond is true

Order is never affected.
"""

from __future__ import annotations

import logging

from sarc.errors import ArrangementError
from sarc.helpers import as_code_list
from sarc.store import OptionStore

logger = logging.getLogger(__name__)


def _set_hidden(store: OptionStore, question_id: int, codes, flag: bool) -> bool:
    try:
        for code in as_code_list(codes):
            store.set_hidden(question_id, code, flag)
    except ArrangementError as e:
        logger.error("Changing visibility on Q%s failed: %s", question_id, e)
    return True


def hide(store: OptionStore, question_id: int, codes, cond: bool = True) -> bool:
    return _set_hidden(store, question_id, codes, bool(cond))


def show(store: OptionStore, question_id: int, codes, cond: bool = True) -> bool:
    return _set_hidden(store, question_id, codes, not cond)


def disable(store: OptionStore, question_id: int, codes, cond: bool = True) -> bool:
    """Mark options read-only and visually disabled, or clear both when cond is false."""
    try:
        for code in as_code_list(codes):
            store.set_read_only(question_id, code, bool(cond))
            store.set_visual_disabled(question_id, code, bool(cond))
    except ArrangementError as e:
        logger.error("Error in option handler (disabled) on Q%s: %s", question_id, e)
    return True
