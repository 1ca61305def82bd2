"""
Parser registry.

Each format is a dict describing how to read a certificate:
    parse:        (text) -> (nodes, let_map, cluster_colors)
    extensions:   file suffixes that select this format
    description:  str
"""

import os

from ..core.state import ProofState
from .alethe import process_alethe
from .dot import process_dot


PARSERS = {
    "alethe": {
        "parse":       process_alethe,
        "extensions":  (".alethe", ".proof", ".txt"),
        "description": "Alethe rule-based proof: (assume ...) and (step ...) lines",
    },
    "dot": {
        "parse":       process_dot,
        "extensions":  (".dot", ".gv"),
        "description": "Graphviz proof graph with JSON comments and phase subgraphs",
    },
}


def guess_format(path: str, text: str = "") -> str:
    """Format by file suffix, else by content, else alethe."""
    suffix = os.path.splitext(path)[1].lower()
    for name, entry in PARSERS.items():
        if suffix in entry["extensions"]:
            return name
    if text.lstrip().startswith(("digraph", "strict digraph")):
        return "dot"
    return "alethe"


def parse_certificate(text: str, fmt: str):
    """(nodes, let_map, cluster_colors) of a certificate in format `fmt`."""
    if fmt not in PARSERS:
        raise ValueError(f"unknown certificate format {fmt!r}; "
                         f"expected one of {sorted(PARSERS)}")
    return PARSERS[fmt]["parse"](text)


def load_proof(text: str, fmt: str) -> ProofState:
    """Parse a certificate into a fresh ProofState."""
    nodes, let_map, cluster_colors = parse_certificate(text, fmt)
    return ProofState.from_parse(nodes, let_map, cluster_colors)


__all__ = [
    "PARSERS", "guess_format", "parse_certificate", "load_proof",
    "process_alethe", "process_dot",
]
