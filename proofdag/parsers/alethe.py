"""
Alethe certificate parser.

An Alethe proof is a sequence of s-expression lines:

    (assume a0 (p))
    (step t1 (cl (q)) :rule R :premises (a0) :args (x))
    (anchor :step t2)                 <- ignored
    (step t2 (cl) :rule subproof :discharge (a0))

Steps cite premises by their Alethe name, always ones defined earlier.
Parsing is two passes: the first assigns dense ids in file order and keeps
the raw premise names, the second resolves those names against the
finished id table. A premise name that never resolves is dropped.

Lines that are neither steps nor assumptions are skipped, and a missing
sub-field (rule, premises, args) yields an empty value.
"""

import re
from dataclasses import dataclass, field

from ..core.state import ProofNode
from ..core.scanner import (
    ALETHE_KEYWORDS, is_step_line, is_assume_line, keep_line,
    find_enclosed_text, join_strings,
)
from ..core.boundary import count_descendants

_STEP_ID = re.compile(r"^\(step\s+([^\s()]+)")
_ASSUME = re.compile(r"^\(assume\s+([^\s()]+)\s*(.*)\)$")
# The rule name ends at the next keyword marker, :args included.
_RULE = re.compile(r":rule\s+(.*?)(?=\s*:(?:premises|args|discharge)\b|$)")


@dataclass
class _RawStep:
    """A parsed line whose premises are still Alethe names."""
    alethe_id: str
    conclusion: str
    rule: str
    args: str = ""
    premises: list = field(default_factory=list)


def parse_rule(line: str) -> str:
    match = _RULE.search(line)
    return match.group(1).replace(")", "").strip() if match else ""


def parse_step_line(line: str):
    """A step line as a _RawStep, or None if its id cannot be read."""
    match = _STEP_ID.match(line)
    if not match:
        return None
    alethe_id = match.group(1)
    rest = match.end()

    clause_start = line.find(ALETHE_KEYWORDS["conclusion"], rest)
    clause = find_enclosed_text(line, "", clause_start) if clause_start != -1 else ""
    conclusion = clause[2:].strip() if clause.startswith("cl") else clause.strip()

    premises = find_enclosed_text(line, ALETHE_KEYWORDS["premises"], rest)
    args = find_enclosed_text(line, ALETHE_KEYWORDS["arguments"], rest)
    discharge = find_enclosed_text(line, ALETHE_KEYWORDS["discharge"], rest)
    return _RawStep(
        alethe_id=alethe_id,
        conclusion=conclusion,
        rule=parse_rule(line),
        args=join_strings(args, discharge),
        premises=premises.split(),
    )


def parse_assume_line(line: str):
    match = _ASSUME.match(line)
    if not match:
        return None
    return _RawStep(alethe_id=match.group(1), conclusion=match.group(2).strip(),
                    rule="assume")


def process_alethe(text: str):
    """
    Build the node table of an Alethe certificate.

    Returns (nodes, let_map, cluster_colors); this format carries neither
    let-bindings nor clusters, so the last two are always empty.
    """
    raw_steps = []
    id_table = {}
    for line in text.split("\n"):
        line = line.strip()
        if not keep_line(line):
            continue
        if is_step_line(line):
            raw = parse_step_line(line)
        elif is_assume_line(line):
            raw = parse_assume_line(line)
        else:
            continue
        if raw is None:
            continue
        id_table[raw.alethe_id] = len(raw_steps)
        raw_steps.append(raw)

    nodes = {}
    for node_id, raw in enumerate(raw_steps):
        children = [id_table[p] for p in raw.premises if p in id_table]
        # The body of a subproof ends on the line just before it
        if raw.rule == "subproof" and node_id > 0 and (node_id - 1) not in children:
            children.append(node_id - 1)
        nodes[node_id] = ProofNode(
            id=node_id,
            conclusion=raw.conclusion,
            rule=raw.rule,
            args=raw.args,
            children=[c for c in children if c != node_id],
        )

    for node in nodes.values():
        for child in node.children:
            if node.id not in nodes[child].parents:
                nodes[child].parents.append(node.id)

    for node_id, size in count_descendants(nodes).items():
        nodes[node_id].descendants = size

    return nodes, {}, {}
