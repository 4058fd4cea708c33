"""
Piping Analyzer — diagnostics over a survey's piping relations.

Produces a read-only report:
    - Roots (questions others pipe from, without a parent of their own)
    - Dangling parent references
    - Cycles in the declared relations
    - Maximum piping depth
    - Piping mode declared without a parent

IMPORTANT: This does NOT modify the survey. Synchronisation tolerates
every finding reported here; the report exists for questionnaire authors.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from sarc.model import PipingMode, Survey


def _find_cycles_dfs(graph: Dict[int, List[int]], start: int, visited: Set[int]) -> Optional[List[int]]:
    """DFS to find a cycle starting from a node, using an explicit stack."""
    path: List[int] = [start]
    on_path: Set[int] = {start}
    visited.add(start)
    stack = [iter(graph.get(start, []))]

    while stack:
        for neighbor in stack[-1]:
            if neighbor in on_path:
                return path[path.index(neighbor):] + [neighbor]
            if neighbor not in visited:
                visited.add(neighbor)
                path.append(neighbor)
                on_path.add(neighbor)
                stack.append(iter(graph.get(neighbor, [])))
                break
        else:
            stack.pop()
            on_path.discard(path.pop())
    return None


def _depth(children: Dict[int, List[int]], root: int) -> int:
    deepest = 0
    seen = {root}
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        for child in children.get(node, []):
            if child not in seen:
                seen.add(child)
                stack.append((child, depth + 1))
    return deepest


@dataclass
class PipingReport:
    """Analysis report for the piping relations of a survey."""

    survey_name: str
    total_questions: int = 0
    piped_questions: int = 0

    roots: List[int] = field(default_factory=list)
    dangling_parents: Dict[int, int] = field(default_factory=dict)  # child -> missing parent
    mode_without_parent: List[int] = field(default_factory=list)
    has_cycles: bool = False
    cycle_example: Optional[List[int]] = None
    max_depth: int = 0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_piping(survey: Survey) -> PipingReport:
    """
    Inspect the piping graph of a survey.

    Returns a PipingReport with findings and warnings.
    """
    report = PipingReport(survey_name=survey.name)
    report.total_questions = len(survey.questions)

    known = set(survey.question_ids())
    children: Dict[int, List[int]] = defaultdict(list)

    for question in survey.questions:
        if question.piping_parent is None:
            if question.piping_mode is not PipingMode.NONE:
                report.mode_without_parent.append(question.id)
            continue
        report.piped_questions += 1
        if question.piping_parent not in known:
            report.dangling_parents[question.id] = question.piping_parent
            continue
        children[question.piping_parent].append(question.id)

    parent_of = {q.id: q.piping_parent for q in survey.questions}
    for question_id in children:
        if parent_of.get(question_id) is None:
            report.roots.append(question_id)

    visited: Set[int] = set()
    for question_id in list(children.keys()):
        if question_id not in visited:
            cycle = _find_cycles_dfs(children, question_id, visited)
            if cycle:
                report.has_cycles = True
                report.cycle_example = cycle
                break

    for root in report.roots:
        report.max_depth = max(report.max_depth, _depth(children, root))

    if report.dangling_parents:
        listing = ", ".join(f"Q{c} -> Q{p}" for c, p in sorted(report.dangling_parents.items()))
        report.add_warning(f"Piping parent not found: {listing}")

    if report.mode_without_parent:
        listing = ", ".join(f"Q{q}" for q in report.mode_without_parent)
        report.add_warning(f"Piping mode declared without a parent: {listing}")

    if report.has_cycles:
        report.add_warning(f"Piping cycle detected: {' -> '.join(f'Q{q}' for q in report.cycle_example)}")

    return report
