"""Type-spec strings to schema fragments.

Encodings: ``object:<Ref>``, ``array:<Ref>``, ``array:<scalar>``,
``enum:<v1,v2,...>`` and a bare scalar type name.  An ``array:`` target
containing a ``.`` is a type reference, anything else is a scalar.
"""

from __future__ import annotations

REF_PREFIX = "#/items/definitions/"


def ref(type_key: str) -> dict:
    return {"$ref": REF_PREFIX + type_key}


def after(text: str, sep: str = ":") -> str:
    """Text after the first *sep*, or ``""`` when *sep* is absent."""
    _, found, rest = text.partition(sep)
    return rest if found else ""


def is_reference(array_type: str) -> bool:
    return "." in array_type


def fragment(type_spec: str) -> dict:
    """Schema fragment for one property's type-spec."""
    if type_spec.startswith("object:"):
        return ref(after(type_spec))
    if type_spec.startswith("array:"):
        item_type = after(type_spec)
        if is_reference(item_type):
            return {"type": "array", "items": ref(item_type)}
        return {"type": "array", "items": {"type": item_type}}
    if type_spec.startswith("enum:"):
        return {"type": "string", "enum": after(type_spec).split(",")}
    return {"type": type_spec}
