"""Extra-field expressions for entries and feeds.

Workflows can ask for fields the normalizer does not emit by default, e.g.
``content:encoded`` or ``itunes:duration``. The expression is plain data, a
comma-separated list of ``source [as alias]`` terms::

    "content:encoded, itunes:duration as duration"

A JSON list of names or a ``{alias: source}`` object means the same thing.
Compiling produces a callable that picks those fields out of a raw mapping.
"""

import re
from typing import Any, Callable, Dict, List, Tuple, Union

FieldSpec = Union[str, List[str], Dict[str, str], Callable]

_NAME = r"[A-Za-z0-9_:.\-]+"
_TERM = re.compile(rf"^({_NAME})(?:\s+as\s+({_NAME}))?$")


def parse_expression(expression: str) -> List[Tuple[str, str]]:
    """Parse an expression into ``(alias, source)`` pairs."""
    if not expression or not expression.strip():
        raise ValueError("no fields given")

    pairs = []
    for position, term in enumerate(expression.split(","), start=1):
        term = term.strip()
        if not term:
            raise ValueError(f"empty field name at term {position}")
        match = _TERM.match(term)
        if not match:
            raise ValueError(f"invalid field term {term!r}")
        source, alias = match.group(1), match.group(2)
        pairs.append((alias or source, source))
    return pairs


def lookup(mapping: Dict[str, Any], source: str) -> Any:
    """Find ``source`` in a raw mapping, trying the common key spellings."""
    if source in mapping:
        return mapping[source]

    # feedparser stores itunes:duration as itunes_duration
    underscored = source.replace(":", "_")
    if underscored in mapping:
        return mapping[underscored]

    if "." in source:
        node: Any = mapping
        for part in source.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    return None


def compile_fields(spec: FieldSpec) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    """Compile a field spec into ``raw mapping -> {name: value}``.

    Raises:
        ValueError: If the field list is malformed.
    """
    if callable(spec):
        return spec

    if isinstance(spec, str):
        pairs = parse_expression(spec)
    elif isinstance(spec, list):
        if not all(isinstance(name, str) and name for name in spec):
            raise ValueError("field list must contain non-empty strings")
        pairs = parse_expression(", ".join(spec))
    elif isinstance(spec, dict):
        if not all(isinstance(v, str) and v for v in spec.values()):
            raise ValueError("field mapping values must be non-empty strings")
        pairs = []
        for alias, source in spec.items():
            terms = parse_expression(source)
            if len(terms) != 1 or terms[0][0] != terms[0][1]:
                raise ValueError(f"field mapping value {source!r} must name a single field")
            pairs.append((alias, terms[0][1]))
    else:
        raise ValueError(f"unsupported field spec of type {type(spec).__name__}")

    def extract(raw: Dict[str, Any]) -> Dict[str, Any]:
        result = {}
        for alias, source in pairs:
            value = lookup(raw, source)
            result[alias] = "" if value is None else value
        return result

    extract.fields = pairs
    return extract
