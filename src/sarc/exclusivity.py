"""
Exclusivity Constraint Engine — reactive mutual exclusion over selections.

Groups are declared per question:

    {"G": [10, 11]}            exclusive: at most one of 10, 11
    {"P": [[1, 2], [3, 4]]}    paired: picking from one side locks the other
    {"Q": [5, [6, 7]]}         paired, scalar sides are promoted to lists

Checking one side of a paired group locks the other side, while codes on
the same side may be combined. A selection holding both sides (pre-checked
or set programmatically) is kept, and both sides are locked.

The engine attaches one change handler to the question and re-evaluates
on every selection change:

    IDLE -> EVALUATING -> IDLE       disables recomputed from scratch
    IDLE -> EVALUATING -> CONFLICT   conflicting groups are reset

Disabling is advisory (read-only + visual state). The engine never
touches codes outside its groups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from sarc.errors import ArrangementError, ConfigurationError
from sarc.store import OptionStore

logger = logging.getLogger(__name__)


class GroupKind(Enum):
    EXCLUSIVE = "exclusive"
    PAIRED = "paired"


class EngineState(Enum):
    IDLE = "idle"
    EVALUATING = "evaluating"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class ExclusivityGroup:
    """
    A named exclusion rule.

    Properties:
        name: Group name as declared
        kind: EXCLUSIVE (one member set) or PAIRED (exactly two role sets)
        sets: Member codes per role
    """

    name: str
    kind: GroupKind
    sets: Tuple[Tuple[int, ...], ...]


@dataclass(frozen=True)
class Membership:
    group: str
    role: int


@dataclass
class Evaluation:
    """Outcome of one evaluation pass."""

    checked: List[int] = field(default_factory=list)
    conflict_groups: Set[str] = field(default_factory=set)
    disabled: Set[int] = field(default_factory=set)

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflict_groups)


def _is_code(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _flatten(values: List[Any]) -> List[int]:
    flat: List[int] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            flat.extend(_flatten(list(value)))
        else:
            flat.append(value)
    return flat


def parse_groups(groups: Mapping[str, Any]) -> List[ExclusivityGroup]:
    """
    Turn authored declarations into ExclusivityGroup objects.

    A list of plain codes is exclusive. A two-element list with nested
    lists is paired. Any other nesting is flattened into one exclusive
    group. Non-list declarations are skipped with a warning.
    """
    if not isinstance(groups, Mapping):
        raise ConfigurationError(f"Exclusivity groups must be a mapping, got {groups!r}")

    parsed: List[ExclusivityGroup] = []
    for name, declaration in groups.items():
        if not isinstance(declaration, (list, tuple)):
            logger.warning("Exclusivity group %r is not a list and is ignored", name)
            continue
        declaration = list(declaration)

        if all(_is_code(v) for v in declaration):
            kind, sets = GroupKind.EXCLUSIVE, [declaration]
        elif len(declaration) == 2:
            kind = GroupKind.PAIRED
            sets = [list(side) if isinstance(side, (list, tuple)) else [side] for side in declaration]
        else:
            kind, sets = GroupKind.EXCLUSIVE, [_flatten(declaration)]

        for member_set in sets:
            for code in member_set:
                if not _is_code(code):
                    raise ConfigurationError(f"Group {name!r} contains a non-integer code: {code!r}")

        parsed.append(ExclusivityGroup(name=str(name), kind=kind, sets=tuple(tuple(s) for s in sets)))
    return parsed


def build_membership_index(groups: List[ExclusivityGroup]) -> Dict[int, List[Membership]]:
    """code -> every (group, role) the code belongs to."""
    index: Dict[int, List[Membership]] = {}
    for group in groups:
        for role, member_set in enumerate(group.sets):
            for code in member_set:
                index.setdefault(code, []).append(Membership(group.name, role))
    return index


class ExclusivityEngine:
    """
    Exclusivity state for one mounted question.

    Create, attach() when the question is shown, detach() when the
    respondent navigates away. The membership index is built once and
    never mutated.
    """

    def __init__(self, store: OptionStore, question_id: int, groups: List[ExclusivityGroup]):
        self.store = store
        self.question_id = question_id
        self.groups: Dict[str, ExclusivityGroup] = {group.name: group for group in groups}
        self.index: Dict[int, List[Membership]] = build_membership_index(groups)
        self.state = EngineState.IDLE
        self.last_evaluation: Optional[Evaluation] = None
        self._attached = False

    @classmethod
    def from_declarations(cls, store: OptionStore, question_id: int, groups: Mapping[str, Any]) -> ExclusivityEngine:
        return cls(store, question_id, parse_groups(groups))

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> Evaluation:
        """Subscribe to change events and run the initial evaluation."""
        if not self._attached:
            self.store.subscribe(self.question_id, self._on_change)
            self._attached = True
        return self.evaluate()

    def detach(self) -> None:
        if self._attached:
            self.store.unsubscribe(self.question_id, self._on_change)
            self._attached = False
        self.state = EngineState.IDLE

    def _on_change(self, question_id: int, code: int) -> None:
        self.evaluate()

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _present_codes(self) -> List[int]:
        present = set(self.store.codes(self.question_id))
        return [code for code in self.index if code in present]

    def _find_conflicts(self, checked: List[int]) -> Set[str]:
        # Only exclusive groups can conflict. Both sides of a paired group
        # being checked is left to the disable pass.
        conflicts: Set[str] = set()
        seen: Dict[str, Set[int]] = {}
        for code in checked:
            for membership in self.index[code]:
                if self.groups[membership.group].kind is not GroupKind.EXCLUSIVE:
                    continue
                members = seen.setdefault(membership.group, set())
                members.add(code)
                if len(members) > 1:
                    conflicts.add(membership.group)
        return conflicts

    def _should_disable(self, code: int, checked: List[int]) -> bool:
        for membership in self.index[code]:
            group = self.groups[membership.group]
            for checked_code in checked:
                for checked_membership in self.index[checked_code]:
                    if checked_membership.group != membership.group:
                        continue
                    if group.kind is GroupKind.EXCLUSIVE and checked_code != code:
                        return True
                    if group.kind is GroupKind.PAIRED and checked_membership.role != membership.role:
                        return True
        return False

    def _reset(self, codes: List[int], conflict_groups: Set[str]) -> None:
        for code in codes:
            if any(m.group in conflict_groups for m in self.index[code]):
                self.store.set_checked(self.question_id, code, False)
                self.store.set_read_only(self.question_id, code, False)
                self.store.set_visual_disabled(self.question_id, code, False)

    def evaluate(self) -> Evaluation:
        """
        One synchronous pass over the current selection.

        On conflict every code of the conflicting groups is unchecked and
        re-enabled, and no disables are computed this pass.
        """
        self.state = EngineState.EVALUATING
        codes = self._present_codes()
        checked = [code for code in codes if self.store.is_checked(self.question_id, code)]
        evaluation = Evaluation(checked=checked)

        evaluation.conflict_groups = self._find_conflicts(checked)
        if evaluation.has_conflict:
            logger.warning(
                "Q%s: conflicting selection in %s, resetting",
                self.question_id,
                ", ".join(sorted(evaluation.conflict_groups)),
            )
            self._reset(codes, evaluation.conflict_groups)
            self.state = EngineState.CONFLICT
            self.last_evaluation = evaluation
            return evaluation

        for code in codes:
            disable = self._should_disable(code, checked)
            if disable:
                evaluation.disabled.add(code)
            self.store.set_read_only(self.question_id, code, disable)
            self.store.set_visual_disabled(self.question_id, code, disable)

        self.state = EngineState.IDLE
        self.last_evaluation = evaluation
        return evaluation


def set_exclusivity(store: OptionStore, question_id: int, groups: Mapping[str, Any]) -> Optional[ExclusivityEngine]:
    """
    Declare exclusivity groups on a question and attach the engine.

    Returns:
        The attached engine, or None when there is nothing to enforce or
        the declaration is invalid (logged).
    """
    try:
        if not groups:
            return None
        engine = ExclusivityEngine.from_declarations(store, question_id, groups)
        engine.attach()
        return engine
    except ArrangementError as e:
        logger.error("Error in exclusivity setup for Q%s: %s", question_id, e)
        return None
