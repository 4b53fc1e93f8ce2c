"""Property-key casing: hyphenated (``max-age``) to compact (``maxAge``)."""

from __future__ import annotations

import re

_DASH = re.compile(r"-+(.?)", re.DOTALL)


def dash_to_camel_case(text: str) -> str:
    """``max-age`` -> ``maxAge``.

    Every dash is dropped and the character after a run of dashes is
    upper-cased, so no dash survives.  Text without dashes is returned as-is.
    """
    if "-" not in text:
        return text
    return _DASH.sub(lambda m: m.group(1).upper(), text)


def _properties_map(node: dict) -> dict | None:
    """The properties map of an emitted node.

    Two shapes are emitted: a flat object carrying ``properties``, and an
    inline type whose object alternative sits inside ``oneOf``.
    """
    props = node.get("properties")
    if isinstance(props, dict) and props:
        return props
    for alternative in node.get("oneOf", ()):
        if isinstance(alternative, dict):
            props = alternative.get("properties")
            if isinstance(props, dict) and props:
                return props
    return None


def normalize_node(node: dict) -> None:
    """Rewrite the keys of *node*'s properties map in place, keeping order.

    Keys that collide after conversion keep the later value.
    """
    if not isinstance(node, dict):
        return
    props = _properties_map(node)
    if props is None:
        return
    rebuilt: dict = {}
    for key, value in props.items():
        rebuilt[dash_to_camel_case(key)] = value
    props.clear()
    props.update(rebuilt)


def normalize_tree(root: dict, step_key: str) -> None:
    """Compact every definition, the step umbrella and the items node."""
    items = root.get("items", {})
    definitions = items.get("definitions", {})
    for definition in definitions.values():
        normalize_node(definition)
    step = definitions.get(step_key)
    if step is not None:
        normalize_node(step)
    normalize_node(items)
