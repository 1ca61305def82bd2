"""
DOT certificate parser.

The graph description a solver prints for its proof looks like:

    digraph proof {
        comment="{\"letMap\" : {\"let1\" : \"(and a b)\"}}";
        0 [label="{(or a b)|RESOLUTION :args (a)}", comment="{\"subProofQty\":3}"];
        1 [label="{a|ASSUME}", comment="{\"subProofQty\":0}"];
        1 -> 0;
        subgraph cluster_in { label="IN" bgcolor="#d6eaf8" 1 };
    }

Node ids are the DOT ids. Edges read `child -> parent`. An id used by an
edge or a subgraph before its node statement gets a pending placeholder;
the node statement later fills that same object in, so edges already
attached survive.

Malformed statements are skipped and malformed JSON comments are treated
as absent metadata.
"""

import json
import re

from ..core.state import ClusterKind, ProofNode
from ..core.scanner import (
    remove_escaped_characters, split_statements, parse_attributes,
    bracket_contents, split_record, strip_quotes,
)

_EDGE = re.compile(r"^(\d+)\s*->\s*(\d+)")
_NODE = re.compile(r"^(\d+)\s*\[")
_QUOTED = re.compile(r'"(?:[^"\\]|\\.)*"')
_BRACKETS = re.compile(r"\[[^\]]*\]")


def _ensure(nodes: dict, node_id: int) -> ProofNode:
    node = nodes.get(node_id)
    if node is None:
        node = ProofNode(id=node_id, pending=True)
        nodes[node_id] = node
    return node


def _load_json(text: str):
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def parse_let_map(statement: str) -> dict:
    """The letMap of the graph-level comment statement, or {}."""
    value = statement[statement.find("=") + 1:].strip()
    value = remove_escaped_characters(remove_escaped_characters(strip_quotes(value)))
    data = _load_json(value)
    if not isinstance(data, dict) or not isinstance(data.get("letMap"), dict):
        return {}
    return data["letMap"]


def apply_subgraph(nodes: dict, cluster_colors: dict, statement: str):
    """Tag every node listed in a subgraph block with the block's phase."""
    start = statement.find("{")
    end = statement.rfind("}")
    inner = statement[start + 1:end] if start != -1 and end > start else statement
    inner = _BRACKETS.sub(" ", inner)

    attributes = parse_attributes(inner)
    kind = ClusterKind.from_label(remove_escaped_characters(attributes.get("label", "")))
    color = attributes.get("bgcolor", "")

    tokens = re.split(r"[\s;,]+", _QUOTED.sub(" ", inner))
    for token in tokens:
        if token.isdigit():
            _ensure(nodes, int(token)).cluster_type = kind
    cluster_colors[kind] = color


def apply_node(nodes: dict, node_id: int, statement: str):
    """Fill in a node from its label and comment attributes, in place."""
    attributes = parse_attributes(bracket_contents(statement))
    node = _ensure(nodes, node_id)
    node.pending = False

    fields = split_record(attributes.get("label", ""))
    conclusion = fields[0]
    rule_part = fields[1] if len(fields) > 1 else ""
    rule, _, args = rule_part.partition(" :args ")
    node.conclusion = remove_escaped_characters(conclusion).strip()
    node.rule = remove_escaped_characters(rule).strip()
    node.args = remove_escaped_characters(args).strip()

    comment = remove_escaped_characters(attributes.get("comment", "")).replace("'", '"')
    data = _load_json(comment) if comment else None
    if isinstance(data, dict) and isinstance(data.get("subProofQty"), int):
        node.descendants = data["subProofQty"]


def apply_edge(nodes: dict, child_id: int, parent_id: int):
    parent = _ensure(nodes, parent_id)
    child = _ensure(nodes, child_id)
    if child_id not in parent.children:
        parent.children.append(child_id)
    if parent_id not in child.parents:
        child.parents.append(parent_id)


def process_dot(text: str):
    """
    Build the node table of a DOT certificate.

    Returns (nodes, let_map, cluster_colors).
    """
    nodes = {}
    let_map = {}
    cluster_colors = {}

    start = text.find("{")
    end = text.rfind("}")
    body = text[start + 1:end] if start != -1 and end > start else text
    body = body.replace("\r", " ").replace("\n", " ").replace("\t", " ")

    for statement in split_statements(body):
        if statement.startswith("subgraph"):
            apply_subgraph(nodes, cluster_colors, statement)
            continue
        edge = _EDGE.match(statement)
        if edge:
            apply_edge(nodes, int(edge.group(1)), int(edge.group(2)))
            continue
        node = _NODE.match(statement)
        if node:
            apply_node(nodes, int(node.group(1)), statement)
            continue
        if statement.startswith("comment") and not let_map:
            let_map = parse_let_map(statement)

    return dict(sorted(nodes.items())), let_map, cluster_colors
