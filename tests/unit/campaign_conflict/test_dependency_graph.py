"""
Unit Tests for the Dependency Graph

Precedence edges, symmetric exclusions, cycle search and the
first-violation rule for proposed execution orders.
"""

import pytest

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.campaign_conflict_service.dependency_graph import (
    DependencyGraph,
    EdgeKind,
    soft_order_warnings,
)
from microservices.campaign_conflict_service.models import ViolationKind


def graph_of(*records):
    return DependencyGraph.from_records(records)


class TestGraphConstruction:

    def test_prerequisites_keep_declaration_order(self, factory):
        graph = graph_of(factory.make_dependency("C", depends_on=["B", "A", "B"]))

        assert graph.prerequisites_of("C") == ["B", "A"]
        assert graph.prerequisites_of("A") == []

    def test_exclusion_is_symmetric(self, factory):
        graph = graph_of(factory.make_dependency("A", exclusive_with=["B"]))

        assert graph.exclusions_of("A") == ["B"]
        assert graph.exclusions_of("B") == ["A"]

    def test_declared_exclusions_come_first(self, factory):
        graph = graph_of(
            factory.make_dependency("A", exclusive_with=["Z"]),
            factory.make_dependency("C", exclusive_with=["A"]),
            factory.make_dependency("B", exclusive_with=["A"]),
        )

        assert graph.exclusions_of("A") == ["Z", "B", "C"]

    def test_add_edge_directly(self):
        graph = DependencyGraph()
        graph.add_edge(EdgeKind.PRECEDENCE, "A", "B")
        graph.add_edge(EdgeKind.PRECEDENCE, "A", "B")

        assert graph.prerequisites_of("B") == ["A"]


class TestFindCycle:

    def test_acyclic(self, factory):
        graph = graph_of(
            factory.make_dependency("B", depends_on=["A"]),
            factory.make_dependency("C", depends_on=["A", "B"]),
        )

        assert graph.find_cycle() is None

    def test_two_node_cycle(self, factory):
        graph = graph_of(
            factory.make_dependency("A", depends_on=["B"]),
            factory.make_dependency("B", depends_on=["A"]),
        )

        cycle = graph.find_cycle(["A", "B"])

        assert cycle == ["A", "B", "A"]

    def test_three_node_cycle_path_closes(self, factory):
        graph = graph_of(
            factory.make_dependency("A", depends_on=["C"]),
            factory.make_dependency("B", depends_on=["A"]),
            factory.make_dependency("C", depends_on=["B"]),
        )

        cycle = graph.find_cycle()

        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"A", "B", "C"}

    def test_exclusions_never_form_cycles(self, factory):
        graph = graph_of(
            factory.make_dependency("A", exclusive_with=["B"]),
            factory.make_dependency("B", exclusive_with=["A"]),
        )

        assert graph.find_cycle() is None


class TestFindViolation:

    def test_valid_order(self, factory):
        graph = graph_of(factory.make_dependency("C2", depends_on=["C1"]))

        assert graph.find_violation(["C1", "C2"]) is None

    def test_dependency_out_of_order(self, factory):
        graph = graph_of(factory.make_dependency("C2", depends_on=["C1"]))

        violation = graph.find_violation(["C2", "C1"])

        assert violation.kind == ViolationKind.DEPENDENCY_OUT_OF_ORDER
        assert violation.campaign_id == "C2"
        assert violation.related_campaign_id == "C1"

    def test_missing_dependency(self, factory):
        graph = graph_of(factory.make_dependency("C2", depends_on=["C1"]))

        violation = graph.find_violation(["C2"])

        assert violation.kind == ViolationKind.MISSING_DEPENDENCY
        assert "not scheduled" in violation.message

    def test_exclusive_pair(self, factory):
        graph = graph_of(factory.make_dependency("C3", exclusive_with=["C4"]))

        violation = graph.find_violation(["C3", "C4"])

        assert violation.kind == ViolationKind.EXCLUSIVE_CONFLICT
        assert violation.campaign_id == "C3"
        assert violation.related_campaign_id == "C4"

    def test_exclusion_declared_by_later_campaign(self, factory):
        graph = graph_of(factory.make_dependency("C4", exclusive_with=["C3"]))

        violation = graph.find_violation(["C3", "C4"])

        assert violation.kind == ViolationKind.EXCLUSIVE_CONFLICT
        assert violation.campaign_id == "C3"

    def test_first_violation_by_position(self, factory):
        graph = graph_of(
            factory.make_dependency("A", exclusive_with=["D"]),
            factory.make_dependency("B", depends_on=["X"]),
        )

        violation = graph.find_violation(["A", "B", "D"])

        assert violation.kind == ViolationKind.EXCLUSIVE_CONFLICT

    def test_prerequisites_checked_before_exclusions(self, factory):
        graph = graph_of(factory.make_dependency("A", depends_on=["X"], exclusive_with=["B"]))

        violation = graph.find_violation(["A", "B"])

        assert violation.kind == ViolationKind.MISSING_DEPENDENCY

    def test_repeated_id_uses_first_position(self, factory):
        graph = graph_of(factory.make_dependency("B", depends_on=["A"]))

        assert graph.find_violation(["A", "B", "A"]) is None
        assert graph.find_violation(["B", "A", "B"]).kind == ViolationKind.DEPENDENCY_OUT_OF_ORDER

    @pytest.mark.parametrize("order", [[], ["A"], ["A", "B", "C"]])
    def test_no_records_means_any_order(self, order):
        assert DependencyGraph().find_violation(order) is None


class TestSoftOrderWarnings:

    def test_required_before_contradicted(self, factory):
        records = [factory.make_dependency("B", required_before=["A"])]

        assert soft_order_warnings(records, ["B", "A"]) == ["A is expected to run before B"]
        assert soft_order_warnings(records, ["A", "B"]) == []

    def test_required_after_contradicted(self, factory):
        records = [factory.make_dependency("A", required_after=["B"])]

        assert soft_order_warnings(records, ["B", "A"]) == ["B is expected to run after A"]
        assert soft_order_warnings(records, ["A", "B"]) == []

    def test_unscheduled_hints_ignored(self, factory):
        records = [factory.make_dependency("A", required_before=["Z"], required_after=["Y"])]

        assert soft_order_warnings(records, ["A"]) == []
