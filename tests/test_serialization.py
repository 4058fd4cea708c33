"""
Tests for serialization of surveys and arrangement plans.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `sarc.serialization`.
"""

import pytest
from sarc.errors import ConfigurationError
from sarc.examples import build_example_survey
from sarc.model import OptionKind, PipingMode
from sarc.plan import ArrangementPlan, QuestionPlan
from sarc.rotation import RotationConfig
from sarc.serialization import (
    plan_from_dict,
    plan_from_yaml,
    plan_to_dict,
    plan_to_yaml,
    survey_from_json,
    survey_from_yaml,
    survey_to_dict,
    survey_to_json,
    survey_to_yaml,
)


def test_json_roundtrip():
    survey = build_example_survey()
    before = survey_to_dict(survey)
    restored = survey_from_json(survey_to_json(survey))
    assert survey_to_dict(restored) == before


def test_yaml_roundtrip():
    survey = build_example_survey()
    survey.metadata = {"source": "brand_funnel.yaml"}
    before = survey_to_dict(survey)
    restored = survey_from_yaml(survey_to_yaml(survey))
    assert survey_to_dict(restored) == before


def test_survey_from_authored_yaml():
    text = """
name: Authored
questions:
  - id: 1
    text: Heard of?
    options:
      - {code: 1, label: A}
      - {code: 2, label: B}
      - {code: 9, label: Other, kind: fixed}
  - id: 2
    piping_parent: 1
    piping_mode: include
    options:
      - {code: 1}
      - {code: 2}
"""
    survey = survey_from_yaml(text)
    first = survey.get_question(1)
    assert first.codes() == [1, 2, 9]
    assert first.get_option(9).kind is OptionKind.FIXED
    second = survey.get_question(2)
    assert second.piping_parent == 1
    assert second.piping_mode is PipingMode.INCLUDE


def test_plan_roundtrip():
    plan = ArrangementPlan(
        name="Funnel",
        questions=[
            QuestionPlan(
                question_id=1,
                rotation_groups=[[1, 2], [3, 4]],
                rotation=RotationConfig(group=False, top=[5], top_shuffle=False),
                sync_descendants=True,
                sync_exclude=[4],
            ),
            QuestionPlan(question_id=5, exclusivity={"G": [10, 14], "P": [[1, 2], [3]]}),
        ],
    )
    before = plan_to_dict(plan)
    restored = plan_from_yaml(plan_to_yaml(plan))
    assert plan_to_dict(restored) == before


def test_plan_from_authored_yaml():
    text = """
questions:
  - question_id: 3
    rotation_groups: [[1, 2, 3], [4, 5]]
    rotation: {group: true, bot: [9], botShuffle: false}
    exclusivity:
      G: [10, 11]
"""
    plan = plan_from_yaml(text)
    question_plan = plan.get(3)
    assert question_plan.rotation.bot == [9]
    assert question_plan.rotation.bot_shuffle is False
    assert question_plan.exclusivity == {"G": [10, 11]}
    assert plan.get(4) is None


def test_plan_requires_question_id():
    with pytest.raises(ConfigurationError):
        plan_from_dict({"questions": [{"hide": [1]}]})


def test_empty_plan_yaml():
    assert plan_from_yaml("").questions == []
