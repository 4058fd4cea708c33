"""
Small helpers shared by the arrangement operations and by authored
question setup code.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Sequence

from sarc.errors import ConfigurationError
from sarc.store import OptionStore

logger = logging.getLogger(__name__)


def between(start: int, end: int) -> List[int]:
    """
    Inclusive run of consecutive codes.

    Example:
        between(3, 6) -> [3, 4, 5, 6]
    """
    return list(range(start, end + 1))


def as_code_list(codes: Any, name: str = "codes") -> List[int]:
    """Accept a single code or a list/tuple of codes."""
    if isinstance(codes, bool):
        raise ConfigurationError(f"{name} must be a code or a list of codes, got {codes!r}")
    if isinstance(codes, int):
        return [codes]
    if not isinstance(codes, (list, tuple)):
        raise ConfigurationError(f"{name} must be a code or a list of codes, got {codes!r}")
    for code in codes:
        if isinstance(code, bool) or not isinstance(code, int):
            raise ConfigurationError(f"{name} must contain integer codes, got {code!r}")
    return list(codes)


def fixed_last(options: Sequence) -> List[int]:
    """Codes with every fixed option moved after the normal ones, both stable."""
    normal = [option.code for option in options if not option.is_fixed]
    fixed = [option.code for option in options if option.is_fixed]
    return normal + fixed


def settle_fixed(store: OptionStore, question_id: int) -> None:
    """Restore the fixed-last order if a relative move broke it."""
    options = store.get_options(question_id)
    settled = fixed_last(options)
    if settled != [option.code for option in options]:
        store.reorder(question_id, settled)


def guarded(fn: Callable[[], Any]) -> bool:
    """
    Run an authored setup callback.

    Failures are logged with their traceback. Always reports success so
    that navigation is never blocked by setup code.
    """
    try:
        fn()
    except Exception:
        logger.exception("Guarded callback %r failed", fn)
    return True


def check(fn: Callable[[], Any]) -> Any:
    """
    Evaluate an authored condition.

    Returns the callback result, or True when the callback fails.
    """
    try:
        return fn()
    except Exception:
        logger.exception("Condition %r failed", fn)
        return True
