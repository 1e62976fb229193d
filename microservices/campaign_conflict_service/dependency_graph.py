"""
Directed constraint graph over campaign dependency records.

Two edge kinds:
    precedence  d -> c   d must execute strictly before c
    exclusion   a -- b   a and b must never co-execute (symmetric)
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .models import CampaignDependency, ConstraintViolation, ViolationKind


class EdgeKind(str, Enum):
    PRECEDENCE = "precedence"
    EXCLUSION = "exclusion"


class DependencyGraph:
    """Precedence and exclusion constraints built from dependency records"""

    def __init__(self):
        # dependent -> ordered prerequisites
        self._requires: Dict[str, List[str]] = {}
        # campaign -> declared exclusions, in declaration order
        self._declared_exclusions: Dict[str, List[str]] = {}
        # campaign -> every campaign it is mutually exclusive with
        self._exclusions: Dict[str, Set[str]] = {}

    @classmethod
    def from_records(cls, records: Iterable[CampaignDependency]) -> "DependencyGraph":
        graph = cls()
        for record in records:
            graph.add_record(record)
        return graph

    def add_record(self, record: CampaignDependency) -> None:
        for prerequisite in record.depends_on:
            self.add_edge(EdgeKind.PRECEDENCE, prerequisite, record.campaign_id)
        for other in record.exclusive_with:
            self.add_edge(EdgeKind.EXCLUSION, record.campaign_id, other)

    def add_edge(self, kind: EdgeKind, source: str, target: str) -> None:
        if kind == EdgeKind.PRECEDENCE:
            prerequisites = self._requires.setdefault(target, [])
            if source not in prerequisites:
                prerequisites.append(source)
            return

        declared = self._declared_exclusions.setdefault(source, [])
        if target not in declared:
            declared.append(target)
        self._exclusions.setdefault(source, set()).add(target)
        self._exclusions.setdefault(target, set()).add(source)

    def prerequisites_of(self, campaign_id: str) -> List[str]:
        return list(self._requires.get(campaign_id, []))

    def exclusions_of(self, campaign_id: str) -> List[str]:
        """Declared exclusions first, then those declared by the other side"""
        declared = self._declared_exclusions.get(campaign_id, [])
        inverse = sorted(self._exclusions.get(campaign_id, set()) - set(declared))
        return list(declared) + inverse

    def find_cycle(self, campaign_ids: Optional[Iterable[str]] = None) -> Optional[List[str]]:
        """
        Return one precedence cycle as a path (first node repeated at the
        end), or None when the precedence edges are acyclic.

        Args:
            campaign_ids: Start nodes to search from (defaults to all dependents)
        """
        white, grey, black = 0, 1, 2
        colour: Dict[str, int] = {}
        path: List[str] = []

        def visit(node: str) -> Optional[List[str]]:
            colour[node] = grey
            path.append(node)
            for prerequisite in self._requires.get(node, []):
                state = colour.get(prerequisite, white)
                if state == grey:
                    return path[path.index(prerequisite):] + [prerequisite]
                if state == white:
                    cycle = visit(prerequisite)
                    if cycle:
                        return cycle
            path.pop()
            colour[node] = black
            return None

        starts = list(campaign_ids) if campaign_ids is not None else list(self._requires)
        for node in starts:
            if colour.get(node, white) == white:
                cycle = visit(node)
                if cycle:
                    return cycle
        return None

    def find_violation(self, order: Sequence[str]) -> Optional[ConstraintViolation]:
        """
        First constraint broken by a proposed execution order.

        Campaigns are checked in order of first appearance; for each one,
        prerequisites are checked before exclusions.
        """
        positions: Dict[str, int] = {}
        for index, campaign_id in enumerate(order):
            positions.setdefault(campaign_id, index)

        for campaign_id, index in positions.items():
            for prerequisite in self._requires.get(campaign_id, []):
                if prerequisite not in positions:
                    return ConstraintViolation(
                        kind=ViolationKind.MISSING_DEPENDENCY,
                        campaign_id=campaign_id,
                        related_campaign_id=prerequisite,
                        message=f"{campaign_id} depends on {prerequisite}, which is not scheduled",
                    )
                if positions[prerequisite] >= index:
                    return ConstraintViolation(
                        kind=ViolationKind.DEPENDENCY_OUT_OF_ORDER,
                        campaign_id=campaign_id,
                        related_campaign_id=prerequisite,
                        message=f"{campaign_id} is scheduled before its dependency {prerequisite}",
                    )

            for other in self.exclusions_of(campaign_id):
                if other in positions:
                    return ConstraintViolation(
                        kind=ViolationKind.EXCLUSIVE_CONFLICT,
                        campaign_id=campaign_id,
                        related_campaign_id=other,
                        message=f"{campaign_id} and {other} are mutually exclusive",
                    )

        return None


def soft_order_warnings(
    records: Iterable[CampaignDependency], order: Sequence[str]
) -> List[str]:
    """
    Warnings for required_before / required_after hints that the order
    contradicts. Hints naming unscheduled campaigns are ignored.
    """
    positions: Dict[str, int] = {}
    for index, campaign_id in enumerate(order):
        positions.setdefault(campaign_id, index)

    warnings = []
    for record in records:
        index = positions.get(record.campaign_id)
        if index is None:
            continue
        for other in record.required_before:
            if other in positions and positions[other] > index:
                warnings.append(f"{other} is expected to run before {record.campaign_id}")
        for other in record.required_after:
            if other in positions and positions[other] < index:
                warnings.append(f"{other} is expected to run after {record.campaign_id}")
    return warnings


__all__ = ["EdgeKind", "DependencyGraph", "soft_order_warnings"]
