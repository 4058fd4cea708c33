"""
Survey session — the caller-facing wrapper with a current-question context.

Engine operations all take an explicit question id. Questionnaire setup
code is usually written against "the question being shown", so the
session keeps that handle (moved by the navigation controller through
enter / leave) and fills it in wherever question_id is omitted.

The session also owns:
    - the random source used by rotations (injectable for tests)
    - the exclusivity engines of the mounted question, torn down on leave
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sarc import piping, positioning, rotation, visibility
from sarc.errors import ConfigurationError
from sarc.exclusivity import ExclusivityEngine, set_exclusivity
from sarc.plan import ArrangementPlan
from sarc.rotation import RotationConfig
from sarc.store import OptionStore

logger = logging.getLogger(__name__)


class SurveySession:
    def __init__(self, store: OptionStore, rng=None, plan: Optional[ArrangementPlan] = None):
        self.store = store
        self.rng = rng if rng is not None else random.Random()
        self.plan = plan
        self.current: Optional[int] = None
        self._engines: List[ExclusivityEngine] = []

    def _resolve(self, question_id: Optional[int]) -> int:
        if question_id is not None:
            return question_id
        if self.current is None:
            raise ConfigurationError("No current question; pass question_id explicitly")
        return self.current

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def enter(self, question_id: int) -> None:
        """
        Mount a question: leave the previous one, then run its plan.
        """
        self.leave()
        self.current = question_id
        logger.debug("Entering Q%s", question_id)
        if self.plan is None:
            return
        question_plan = self.plan.get(question_id)
        if question_plan is None:
            return

        if question_plan.hide:
            self.hide(question_plan.hide)
        if question_plan.rotates:
            self.rotate(question_plan.rotation_groups, question_plan.rotation)
        if question_plan.shuffle_by is not None:
            self.sync_one_to_one(question_plan.shuffle_by)
        if question_plan.sync_descendants:
            self.sync_descendants(question_id, question_plan.sync_exclude)
        if question_plan.exclusivity:
            self.set_exclusivity(question_plan.exclusivity)

    def leave(self) -> None:
        """Unmount the current question and discard every attached exclusivity engine."""
        for engine in self._engines:
            engine.detach()
        self._engines = []
        self.current = None

    @property
    def engines(self) -> List[ExclusivityEngine]:
        return list(self._engines)

    # ------------------------------------------------------------------
    # Arrangement
    # ------------------------------------------------------------------

    def rotate(
        self,
        groups: Sequence[Sequence[int]] = (),
        config: RotationConfig | Dict[str, Any] | None = None,
        question_id: Optional[int] = None,
    ) -> bool:
        return rotation.rotate(self.store, self._resolve(question_id), groups, config, self.rng)

    def place_after(self, base_code: int, codes, question_id: Optional[int] = None) -> bool:
        return positioning.place_after(self.store, self._resolve(question_id), base_code, codes)

    def place_before(self, base_code: int, codes, question_id: Optional[int] = None) -> bool:
        return positioning.place_before(self.store, self._resolve(question_id), base_code, codes)

    def place_at_top(self, codes, question_id: Optional[int] = None) -> bool:
        return positioning.place_at_top(self.store, self._resolve(question_id), codes)

    def sync_descendants(self, base_question_id: int, exclude_question_ids: Sequence[int] = ()) -> bool:
        return piping.sync_descendants(self.store, base_question_id, exclude_question_ids)

    def sync_one_to_one(self, base_question_id: int, target_question_id: Optional[int] = None) -> bool:
        return piping.shuffle_by(self.store, base_question_id, self._resolve(target_question_id))

    # ------------------------------------------------------------------
    # Input state
    # ------------------------------------------------------------------

    def set_exclusivity(self, groups: Mapping[str, Any], question_id: Optional[int] = None) -> bool:
        question_id = self._resolve(question_id)
        engine = set_exclusivity(self.store, question_id, groups)
        if engine is not None:
            self._engines.append(engine)
        return True

    def hide(self, codes, cond: bool = True, question_id: Optional[int] = None) -> bool:
        return visibility.hide(self.store, self._resolve(question_id), codes, cond)

    def show(self, codes, cond: bool = True, question_id: Optional[int] = None) -> bool:
        return visibility.show(self.store, self._resolve(question_id), codes, cond)

    def disable(self, codes, cond: bool = True, question_id: Optional[int] = None) -> bool:
        return visibility.disable(self.store, self._resolve(question_id), codes, cond)
