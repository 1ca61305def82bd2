"""
Property-based and unit tests for the Alethe parser.

Core invariants:
    - children and parents are mutually consistent after parse
    - ids are dense, in file order, starting at 0
    - no node reaches itself through children (acyclic)
    - unknown lines and unresolved premises are dropped, never fatal
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from proofdag.parsers.alethe import process_alethe, parse_rule, parse_step_line
from proofdag.core.boundary import descendants
from proofdag.core.state import ClusterKind


# ── Generators ──────────────────────────────────────────────────────────────

@st.composite
def alethe_proofs(draw, max_steps=8):
    """Random well-formed certificates: each step cites earlier lines."""
    n_assume = draw(st.integers(min_value=1, max_value=3))
    n_steps = draw(st.integers(min_value=1, max_value=max_steps))
    lines = [f"(assume a{i} (p{i}))" for i in range(n_assume)]
    names = [f"a{i}" for i in range(n_assume)]
    for k in range(n_steps):
        premises = draw(st.lists(st.sampled_from(names), max_size=3, unique=True))
        cited = f" :premises ({' '.join(premises)})" if premises else ""
        lines.append(f"(step t{k} (cl (q{k})) :rule r{k % 3}{cited})")
        names.append(f"t{k}")
    return "\n".join(lines)


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestSmallCertificates:
    def test_assume_then_step(self):
        nodes, let_map, colors = process_alethe(
            "(assume a0 (p))\n(step t1 (cl (q)) :rule R :premises (a0))")
        assert len(nodes) == 2
        assert nodes[1].children == [0]
        assert nodes[1].rule == "R"
        assert nodes[0].parents == [1]
        assert let_map == {} and colors == {}

    def test_assume_fields(self):
        nodes, _, _ = process_alethe("(assume h1 (and a b))")
        assert nodes[0].rule == "assume"
        assert nodes[0].conclusion == "(and a b)"
        assert nodes[0].children == []
        assert nodes[0].cluster_type == ClusterKind.NONE

    def test_empty_clause_conclusion(self):
        nodes, _, _ = process_alethe("(assume a0 false)\n(step t1 (cl) :rule resolution :premises (a0))")
        assert nodes[1].conclusion == ""
        assert nodes[1].rule == "resolution"

    def test_args_and_discharge_are_joined(self):
        nodes, _, _ = process_alethe(
            "(step t1 (cl (= a b)) :rule la_generic :args (1 2) :discharge (h1))")
        assert nodes[0].args == "1 2 h1"
        assert nodes[0].rule == "la_generic"

    def test_rule_at_end_of_line(self):
        assert parse_rule("(step t1 (cl (q)) :rule refl)") == "refl"

    def test_rule_stops_at_args(self):
        # :args ends the rule name just like :premises and :discharge do,
        # otherwise "(1 2)" would be glued onto it
        assert parse_rule("(step t1 (cl (q)) :rule la_generic :args (1 2))") == "la_generic"

    def test_rule_before_premises(self):
        assert parse_rule("(step t1 (cl) :rule resolution :premises (a b))") == "resolution"

    def test_missing_rule_is_empty(self):
        raw = parse_step_line("(step t1 (cl (q)))")
        assert raw.rule == ""
        assert raw.premises == []

    def test_id_does_not_confuse_conclusion(self):
        # the id "s" also occurs inside the word "step"
        raw = parse_step_line("(step s (cl (p s)) :rule R)")
        assert raw.alethe_id == "s"
        assert raw.conclusion == "(p s)"


class TestReferences:
    def test_unresolved_premise_dropped(self):
        nodes, _, _ = process_alethe("(step t1 (cl) :rule R :premises (nowhere))")
        assert nodes[0].children == []

    def test_premise_order_kept(self):
        text = "\n".join([
            "(assume a0 (p))",
            "(assume a1 (q))",
            "(step t2 (cl) :rule resolution :premises (a1 a0))",
        ])
        nodes, _, _ = process_alethe(text)
        assert nodes[2].children == [1, 0]
        assert nodes[0].parents == [2]
        assert nodes[1].parents == [2]

    def test_shared_premise_has_many_parents(self):
        text = "\n".join([
            "(assume a0 (p))",
            "(step t1 (cl (q)) :rule R :premises (a0))",
            "(step t2 (cl (r)) :rule S :premises (a0))",
        ])
        nodes, _, _ = process_alethe(text)
        assert nodes[0].parents == [1, 2]

    def test_subproof_cites_previous_line(self):
        text = "\n".join([
            "(assume h1 (p))",
            "(anchor :step t3)",
            "(assume t3.a0 (q))",
            "(step t3.t1 (cl (r)) :rule foo :premises (t3.a0))",
            "(step t3 (cl (not (q)) (r)) :rule subproof :discharge (t3.a0))",
        ])
        nodes, _, _ = process_alethe(text)
        assert len(nodes) == 4
        assert nodes[3].rule == "subproof"
        assert nodes[3].children == [2]
        assert nodes[3].args == "t3.a0"
        assert nodes[3].conclusion == "(not (q)) (r)"


class TestDegradation:
    def test_unknown_lines_skipped(self):
        text = "\n".join([
            "unsat",
            "(define-fun f () Bool true)",
            "(step broken",
            "",
            "(step t1 (cl) :rule R)",
        ])
        nodes, _, _ = process_alethe(text)
        assert list(nodes) == [0]
        assert nodes[0].rule == "R"

    def test_anchor_lines_skipped(self):
        nodes, _, _ = process_alethe("(anchor :step t1)\n(assume a0 (p))")
        assert len(nodes) == 1

    def test_empty_input(self):
        assert process_alethe("") == ({}, {}, {})

    def test_windows_line_endings(self):
        nodes, _, _ = process_alethe("(assume a0 (p))\r\n(step t1 (cl) :rule R :premises (a0))\r\n")
        assert nodes[1].children == [0]


class TestDescendantCounts:
    def test_chain(self):
        text = "\n".join([
            "(assume a0 (p))",
            "(step t1 (cl (q)) :rule R :premises (a0))",
            "(step t2 (cl (r)) :rule R :premises (t1))",
        ])
        nodes, _, _ = process_alethe(text)
        assert [nodes[i].descendants for i in range(3)] == [0, 1, 2]

    def test_diamond_counts_distinct_nodes(self):
        text = "\n".join([
            "(assume a0 (p))",
            "(step t1 (cl (q)) :rule R :premises (a0))",
            "(step t2 (cl (r)) :rule R :premises (a0))",
            "(step t3 (cl) :rule R :premises (t1 t2))",
        ])
        nodes, _, _ = process_alethe(text)
        assert nodes[3].descendants == 3


# ── Property-based tests ─────────────────────────────────────────────────────

class TestParserProperties:

    @given(alethe_proofs())
    def test_children_and_parents_symmetric(self, text):
        nodes, _, _ = process_alethe(text)
        for node in nodes.values():
            for child in node.children:
                assert node.id in nodes[child].parents
            for parent in node.parents:
                assert node.id in nodes[parent].children

    @given(alethe_proofs())
    def test_ids_dense_in_file_order(self, text):
        nodes, _, _ = process_alethe(text)
        assert list(nodes) == list(range(len(text.split("\n"))))

    @given(alethe_proofs())
    @settings(max_examples=50)
    def test_acyclic(self, text):
        nodes, _, _ = process_alethe(text)
        for node_id in nodes:
            assert node_id not in descendants(nodes, node_id)

    @given(alethe_proofs())
    def test_descendant_count_matches_reach(self, text):
        nodes, _, _ = process_alethe(text)
        for node_id, node in nodes.items():
            assert node.descendants == len(set(descendants(nodes, node_id)))
