"""
Rotation Engine — grouped randomisation of a question's options.

A rotation partitions the question's NORMAL options into:
    - one bucket per caller-supplied group (codes that exist in the question)
    - one singleton bucket per ungrouped code, in ascending code order

Buckets are disjoint and exhaustive. Within-bucket order and bucket order
are shuffled independently. Optional top / bottom codes are pinned at the
ends of the interior order, and FIXED options always close the list.

The whole new order is computed first and applied with a single
store.reorder(), so a malformed configuration never leaves a half-rotated
question behind.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from sarc.errors import ArrangementError, ConfigurationError
from sarc.helpers import as_code_list
from sarc.store import OptionStore

logger = logging.getLogger(__name__)


_CONFIG_KEYS = {
    "group": "group",
    "option": "option",
    "top": "top",
    "topShuffle": "top_shuffle",
    "top_shuffle": "top_shuffle",
    "bot": "bot",
    "botShuffle": "bot_shuffle",
    "bot_shuffle": "bot_shuffle",
}


@dataclass
class RotationConfig:
    """
    Options for rotate().

    Properties:
        group: Shuffle the bucket sequence (group-level rotation)
        option: Shuffle codes inside each caller-supplied group
        top: Codes pinned ahead of everything else
        top_shuffle: Shuffle the pinned top codes among themselves
        bot: Codes pinned at the end of the interior order
        bot_shuffle: Shuffle the pinned bottom codes among themselves
    """

    group: bool = True
    option: bool = True
    top: Optional[List[int]] = None
    top_shuffle: bool = True
    bot: Optional[List[int]] = None
    bot_shuffle: bool = True

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> RotationConfig:
        """
        Build a config from authored keys.

        Both the camelCase keys used in questionnaire scripts
        (topShuffle, botShuffle) and snake_case keys are accepted.
        """
        if d is None:
            return cls()
        if not isinstance(d, dict):
            raise ConfigurationError(f"Rotation config must be a mapping, got {d!r}")
        kwargs: Dict[str, Any] = {}
        for key, value in d.items():
            if key not in _CONFIG_KEYS:
                raise ConfigurationError(f"Unknown rotation config key: {key!r}")
            kwargs[_CONFIG_KEYS[key]] = value
        config = cls(**kwargs)
        config.validate()
        return config

    def validate(self) -> None:
        for name in ("group", "option", "top_shuffle", "bot_shuffle"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"{name} must be a boolean")
        if self.top is not None and not isinstance(self.top, (list, tuple)):
            raise ConfigurationError("top must be an array")
        if self.bot is not None and not isinstance(self.bot, (list, tuple)):
            raise ConfigurationError("bottom must be an array")
        if self.top is not None:
            as_code_list(list(self.top), "top")
        if self.bot is not None:
            as_code_list(list(self.bot), "bot")


def _validate_groups(groups: Any) -> List[List[int]]:
    if not isinstance(groups, (list, tuple)):
        raise ConfigurationError("optionGroups must be an array of arrays")
    if any(not isinstance(group, (list, tuple)) for group in groups):
        raise ConfigurationError("optionGroups must be an array of arrays")
    return [as_code_list(list(group), "group") for group in groups]


def _dedupe(codes: Sequence[int]) -> List[int]:
    seen = set()
    result = []
    for code in codes:
        if code not in seen:
            seen.add(code)
            result.append(code)
    return result


def _pin(codes: Sequence[int], available: set, fixed: set, label: str, shuffle: bool, rng) -> List[int]:
    pinned = _dedupe(codes)
    if shuffle:
        rng.shuffle(pinned)
    present = []
    for code in pinned:
        if code in available:
            present.append(code)
        elif code in fixed:
            logger.warning("%s : Option with rank %s is fixed and stays last", label, code)
        else:
            logger.warning("%s : Option with rank %s not found", label, code)
    return present


def build_buckets(
    normal_codes: Sequence[int],
    groups: Sequence[Sequence[int]],
    shuffle_options: bool,
    rng,
) -> List[List[int]]:
    """
    Partition codes into group buckets followed by singleton buckets.

    A code claimed by an earlier group is not claimed again by a later one.
    """
    pool = sorted(normal_codes)
    buckets: List[List[int]] = []
    for group in groups:
        members = set(group)
        bucket = [code for code in pool if code in members]
        if shuffle_options:
            rng.shuffle(bucket)
        pool = [code for code in pool if code not in members]
        if bucket:
            buckets.append(bucket)
    buckets.extend([code] for code in pool)
    return buckets


def plan_rotation(
    store: OptionStore,
    question_id: int,
    groups: Sequence[Sequence[int]],
    config: RotationConfig,
    rng=None,
) -> List[int]:
    """
    Compute the rotated order without applying it.

    Raises:
        ConfigurationError: malformed groups / top / bot
        ReferenceLookupError: unknown question
    """
    rng = rng if rng is not None else random
    config.validate()
    groups = _validate_groups(groups)

    options = store.get_options(question_id)
    normal = [option.code for option in options if not option.is_fixed]
    fixed = [option.code for option in options if option.is_fixed]

    buckets = build_buckets(normal, groups, config.option, rng)
    if config.group:
        rng.shuffle(buckets)
    interior = [code for bucket in buckets for code in bucket]

    if config.top is not None:
        top = _pin(list(config.top), set(normal), set(fixed), "Top", config.top_shuffle, rng)
        interior = top + [code for code in interior if code not in top]

    if config.bot is not None:
        bot = _pin(list(config.bot), set(normal), set(fixed), "Bot", config.bot_shuffle, rng)
        interior = [code for code in interior if code not in bot] + bot

    return interior + fixed


def rotate(
    store: OptionStore,
    question_id: int,
    groups: Sequence[Sequence[int]] = (),
    config: RotationConfig | Dict[str, Any] | None = None,
    rng=None,
) -> bool:
    """
    Rotate a question's options by groups.

    Args:
        store: Option store holding the question
        question_id: Target question
        groups: Lists of codes rotated as one unit each
        config: RotationConfig or an authored dict (see RotationConfig.from_dict)
        rng: Random source with a shuffle() method; unseeded module random by default

    Returns:
        Always True. Failures are logged and leave the order untouched.
    """
    try:
        if not isinstance(config, RotationConfig):
            config = RotationConfig.from_dict(config)
        if isinstance(groups, (list, tuple)) and len(groups) == 0:
            return True
        new_order = plan_rotation(store, question_id, groups, config, rng)
        logger.debug("Q%s rotated order: %s", question_id, new_order)
        store.reorder(question_id, new_order)
    except ArrangementError as e:
        logger.error("Rotation of Q%s failed: %s", question_id, e)
    return True
