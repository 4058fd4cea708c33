"""
Serialization helpers for surveys and arrangement plans.

Provides JSON/YAML round-trip via an intermediate dict representation.
This module intentionally keeps serialization structure stable and explicit.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from sarc.errors import ConfigurationError
from sarc.model import Option, OptionKind, PipingMode, Question, Survey
from sarc.plan import ArrangementPlan, QuestionPlan
from sarc.rotation import RotationConfig


def option_to_dict(o: Option) -> Dict[str, Any]:
    return {"code": o.code, "label": o.label, "kind": o.kind.value}


def option_from_dict(d: Dict[str, Any]) -> Option:
    return Option(code=d["code"], label=d.get("label", ""), kind=OptionKind(d.get("kind", "normal")))


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id,
        "text": q.text,
        "options": [option_to_dict(o) for o in q.options],
        "piping_parent": q.piping_parent,
        "piping_mode": q.piping_mode.value,
    }


def question_from_dict(d: Dict[str, Any]) -> Question:
    return Question(
        id=d["id"],
        text=d.get("text", ""),
        options=[option_from_dict(o) for o in d.get("options", [])],
        piping_parent=d.get("piping_parent"),
        piping_mode=PipingMode(d.get("piping_mode", "none")),
    )


def survey_to_dict(s: Survey) -> Dict[str, Any]:
    return {
        "name": s.name,
        "questions": [question_to_dict(q) for q in s.questions],
        "metadata": s.metadata,
    }


def survey_from_dict(d: Dict[str, Any]) -> Survey:
    s = Survey(name=d.get("name", ""))
    s.questions = [question_from_dict(q) for q in d.get("questions", [])]
    s.metadata = d.get("metadata", {})
    return s


def rotation_to_dict(r: RotationConfig | None) -> Dict[str, Any] | None:
    if r is None:
        return None
    return {
        "group": r.group,
        "option": r.option,
        "top": list(r.top) if r.top is not None else None,
        "top_shuffle": r.top_shuffle,
        "bot": list(r.bot) if r.bot is not None else None,
        "bot_shuffle": r.bot_shuffle,
    }


def rotation_from_dict(d: Dict[str, Any] | None) -> RotationConfig | None:
    if d is None:
        return None
    return RotationConfig.from_dict({k: v for k, v in d.items() if not (k in ("top", "bot") and v is None)})


def question_plan_to_dict(p: QuestionPlan) -> Dict[str, Any]:
    return {
        "question_id": p.question_id,
        "hide": p.hide,
        "rotation_groups": p.rotation_groups,
        "rotation": rotation_to_dict(p.rotation),
        "shuffle_by": p.shuffle_by,
        "sync_descendants": p.sync_descendants,
        "sync_exclude": p.sync_exclude,
        "exclusivity": p.exclusivity,
    }


def question_plan_from_dict(d: Dict[str, Any]) -> QuestionPlan:
    if "question_id" not in d:
        raise ConfigurationError(f"Question plan without question_id: {d!r}")
    return QuestionPlan(
        question_id=d["question_id"],
        hide=d.get("hide", []),
        rotation_groups=d.get("rotation_groups", []),
        rotation=rotation_from_dict(d.get("rotation")),
        shuffle_by=d.get("shuffle_by"),
        sync_descendants=d.get("sync_descendants", False),
        sync_exclude=d.get("sync_exclude", []),
        exclusivity=d.get("exclusivity", {}),
    )


def plan_to_dict(p: ArrangementPlan) -> Dict[str, Any]:
    return {"name": p.name, "questions": [question_plan_to_dict(q) for q in p.questions]}


def plan_from_dict(d: Dict[str, Any]) -> ArrangementPlan:
    return ArrangementPlan(
        name=d.get("name", ""),
        questions=[question_plan_from_dict(q) for q in d.get("questions", [])],
    )


def survey_to_json(s: Survey) -> str:
    return json.dumps(survey_to_dict(s), sort_keys=True)


def survey_from_json(s: str) -> Survey:
    d = json.loads(s)
    return survey_from_dict(d)


def survey_to_yaml(s: Survey) -> str:
    return yaml.safe_dump(survey_to_dict(s))


def survey_from_yaml(s: str) -> Survey:
    d = yaml.safe_load(s)
    return survey_from_dict(d)


def plan_to_yaml(p: ArrangementPlan) -> str:
    return yaml.safe_dump(plan_to_dict(p))


def plan_from_yaml(s: str) -> ArrangementPlan:
    d = yaml.safe_load(s)
    return plan_from_dict(d or {})
