"""
Selection predicates: pure filters over the node table.

Each returns a list of ids, in table order. Hidden nodes are never
selected. select_by_regex lets re.error through; reporting a bad pattern
is the caller's job.
"""

import re


def _visible(nodes: dict):
    return [n for n in nodes.values() if not n.is_hidden]


def select_by_rule(nodes: dict, rule: str) -> list:
    rule = rule.strip()
    return [n.id for n in _visible(nodes) if n.rule.strip() == rule]


def select_by_regex(nodes: dict, pattern: str) -> list:
    """Ids whose conclusion contains a match for `pattern`."""
    regex = re.compile(pattern)
    return [n.id for n in _visible(nodes) if regex.search(n.conclusion)]


def select_by_ids(nodes: dict, ids: list) -> list:
    wanted = set(ids)
    return [n.id for n in _visible(nodes) if n.id in wanted]


def parse_id_list(text: str) -> list:
    """
    Ids written as a bracketed list or inclusive range.

        "[1, 15, 6,3]" -> [1, 15, 6, 3]
        "[ 4 -7]"      -> [4, 5, 6, 7]

    Anything else gives [].
    """
    match = re.search(r"\[([^\[\]]+)\]", text)
    if not match:
        return []
    inside = match.group(1).strip()
    span = re.fullmatch(r"(\d+)\s*-\s*(\d+)", inside)
    if span:
        low, high = int(span.group(1)), int(span.group(2))
        return list(range(low, high + 1))
    return [int(tok) for tok in re.split(r"[,\s]+", inside) if tok.isdigit()]
