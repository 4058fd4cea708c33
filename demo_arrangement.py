#!/usr/bin/env python3
"""
Arrangement Demo: Survey → Plan → Rotation → Piping Sync → Exclusivity

Shows the full workflow on the example brand funnel:
1. Load the survey and an arrangement plan (YAML)
2. Analyze piping relations
3. Enter Q1: rotate and propagate the order to piped questions
4. Enter Q5: attach exclusivity rules and simulate clicks
"""

import logging
import random

from sarc.analyzer import analyze_piping
from sarc.examples import build_example_survey
from sarc.serialization import plan_from_yaml
from sarc.session import SurveySession
from sarc.store import InMemoryOptionStore


PLAN_YAML = """
name: Brand funnel setup
questions:
  - question_id: 1
    rotation_groups: [[1, 2, 3], [4, 5]]
    rotation: {group: true, option: true, bot: [6], botShuffle: false}
    sync_descendants: true
    sync_exclude: [4]
  - question_id: 5
    exclusivity:
      self: [[10, 11, 12, 13], [14]]
"""


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 80)
    print("ARRANGEMENT DEMO: Survey → Plan → Rotation → Sync → Exclusivity")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Load
    # =========================================================================
    print("\n1. LOADING...")
    survey = build_example_survey()
    plan = plan_from_yaml(PLAN_YAML)
    store = InMemoryOptionStore(survey)
    session = SurveySession(store, rng=random.Random(), plan=plan)
    print(f"   ✓ Survey: {survey.name} ({len(survey.questions)} questions)")
    print(f"   ✓ Plan: {plan.name} ({len(plan.questions)} question plans)")

    # =========================================================================
    # STEP 2: Analyze piping
    # =========================================================================
    print("\n2. ANALYZING PIPING...")
    report = analyze_piping(survey)
    print(f"   ✓ Roots: {report.roots}")
    print(f"   ✓ Max depth: {report.max_depth}")
    print(f"   ✓ Cycles detected: {report.has_cycles}")
    for warning in report.warnings:
        print(f"      - {warning}")

    # =========================================================================
    # STEP 3: Rotation and sync
    # =========================================================================
    print("\n3. ENTERING Q1...")
    session.enter(1)
    for question_id in store.question_ids():
        print(f"   Q{question_id}: {store.codes(question_id)}")

    # =========================================================================
    # STEP 4: Exclusivity
    # =========================================================================
    print("\n4. ENTERING Q5...")
    session.enter(5)
    store.select(5, 14)
    locked = [o.code for o in store.get_options(5) if o.read_only]
    print(f"   ✓ After picking 14, locked: {locked}")
    store.select(5, 10)
    checked = [o.code for o in store.get_options(5) if o.checked]
    print(f"   ✓ After picking 10 as well, checked: {checked} (both sides locked)")
    session.leave()

    print("\n" + "=" * 80)
    print("DEMO COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
