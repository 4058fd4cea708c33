"""
Declarative per-question arrangement plans.

Question setup is normally a few calls made when the question is shown
(rotate, then sync, then exclusivity). A plan captures those calls as
data so they can be authored in YAML next to the questionnaire.

Example (YAML):

    questions:
      - question_id: 3
        rotation_groups: [[1, 2, 3], [4, 5]]
        rotation: {group: true, option: true, bot: [9], botShuffle: false}
        sync_descendants: true
        sync_exclude: [7]
        exclusivity:
          G: [10, 11]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sarc.rotation import RotationConfig


@dataclass
class QuestionPlan:
    """
    Setup steps for one question, run in this order on entry:

        1. hide          codes hidden before anything is shown
        2. rotation      rotate(rotation_groups, rotation)
        3. shuffle_by    copy the order of another question (strict)
        4. descendants   propagate this question's order to piped questions
        5. exclusivity   attach the constraint engine
    """

    question_id: int
    hide: List[int] = field(default_factory=list)
    rotation_groups: List[List[int]] = field(default_factory=list)
    rotation: Optional[RotationConfig] = None
    shuffle_by: Optional[int] = None
    sync_descendants: bool = False
    sync_exclude: List[int] = field(default_factory=list)
    exclusivity: Dict[str, Any] = field(default_factory=dict)

    @property
    def rotates(self) -> bool:
        return bool(self.rotation_groups)


@dataclass
class ArrangementPlan:
    name: str = ""
    questions: List[QuestionPlan] = field(default_factory=list)

    def get(self, question_id: int) -> Optional[QuestionPlan]:
        for question_plan in self.questions:
            if question_plan.question_id == question_id:
                return question_plan
        return None
