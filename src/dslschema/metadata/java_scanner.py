"""Scan annotated Java sources into type metadata (tree-sitter based).

Each class, interface, enum or record declaration becomes a
:class:`TypeInfo`.  Nested types are named ``pkg.Outer$Inner``.
Superclass names are resolved through single-type imports, then through
types declared in the same file, then through the file's package.

Annotation arguments are converted to plain Python values:

* string literals (and ``"a" + "b"`` concatenations) -> ``str``
* ``true`` / ``false`` -> ``bool``
* integer literals -> ``int``
* ``{...}`` array initializers -> ``list``
* nested annotations such as ``@YamlProperty(...)`` -> ``dict``
* class literals (``Foo.class``) -> the resolved canonical type name
* anything else (constants, expressions) -> its source text
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dslschema.exit_codes import CatalogError
from dslschema.metadata.index import MetadataIndex
from dslschema.metadata.model import TypeInfo

log = logging.getLogger(__name__)

_TYPE_DECLARATIONS = frozenset({
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
    "annotation_type_declaration",
})


def _get_java_parser():
    from tree_sitter_language_pack import get_parser

    return get_parser("java")


def scan_java_sources(paths: list[str | Path]) -> MetadataIndex:
    """Scan ``*.java`` files (directories are searched recursively)."""
    files: list[Path] = []
    for p in paths:
        p = Path(p)
        if p.is_dir():
            files.extend(sorted(p.rglob("*.java")))
        elif p.is_file() and p.suffix == ".java":
            files.append(p)
        else:
            raise CatalogError(f"Not a Java source or directory: {p}")

    parser = _get_java_parser()
    scanner = JavaTypeScanner()
    types: list[TypeInfo] = []
    for f in files:
        source = f.read_bytes()
        tree = parser.parse(source)
        types.extend(scanner.scan(tree, source, str(f)))
    log.info("Scanned %d Java files, found %d types", len(files), len(types))
    return MetadataIndex(types)


class JavaTypeScanner:
    """Extract :class:`TypeInfo` records from one parsed Java file."""

    def scan(self, tree, source: bytes, file_path: str) -> list[TypeInfo]:
        self._package = ""
        self._imports: dict[str, str] = {}
        self._declared: dict[str, str] = {}
        root = tree.root_node

        for child in root.children:
            if child.type == "package_declaration":
                self._package = self._first_name(child, source)
            elif child.type == "import_declaration":
                self._record_import(child, source)

        # First pass: names of every declared type, so superclasses that
        # refer to sibling or nested types resolve regardless of order.
        pending: list[tuple[Any, str]] = []
        self._collect_declarations(root, source, None, pending)

        types = []
        for node, qualified in pending:
            types.append(self._make_type(node, source, qualified, file_path))
        return types

    def node_text(self, node, source: bytes) -> str:
        if node is None:
            return ""
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    # ---- Declarations ----

    def _first_name(self, node, source) -> str:
        for child in node.children:
            if child.type in ("scoped_identifier", "identifier"):
                return self.node_text(child, source)
        return ""

    def _record_import(self, node, source):
        text = self.node_text(node, source)
        if " static " in f" {text} " or text.rstrip(";").rstrip().endswith("*"):
            return
        path = self._first_name(node, source)
        if path:
            self._imports[path.rsplit(".", 1)[-1]] = path

    def _collect_declarations(self, node, source, outer: str | None, pending: list):
        for child in node.children:
            if child.type in _TYPE_DECLARATIONS:
                name_node = child.child_by_field_name("name")
                if name_node is None:
                    continue
                simple = self.node_text(name_node, source)
                if outer:
                    qualified = f"{outer}${simple}"
                else:
                    qualified = f"{self._package}.{simple}" if self._package else simple
                self._declared.setdefault(simple, qualified)
                pending.append((child, qualified))
                body = child.child_by_field_name("body")
                if body is not None:
                    self._collect_declarations(body, source, qualified, pending)
            elif child.type in ("class_body", "interface_body", "enum_body", "enum_body_declarations"):
                self._collect_declarations(child, source, outer, pending)

    def _make_type(self, node, source, qualified: str, file_path: str) -> TypeInfo:
        super_name = None
        superclass = node.child_by_field_name("superclass")
        if superclass is not None:
            super_name = self._resolve_type_name(self._superclass_name(superclass, source))
        return TypeInfo(
            name=qualified,
            super_name=super_name,
            annotations=self._annotations(node, source),
            source=f"{file_path}:{node.start_point[0] + 1}",
        )

    def _superclass_name(self, node, source) -> str:
        for child in node.named_children:
            if child.type in ("type_identifier", "scoped_type_identifier"):
                return self.node_text(child, source)
            if child.type == "generic_type":
                for sub in child.named_children:
                    if sub.type in ("type_identifier", "scoped_type_identifier"):
                        return self.node_text(sub, source)
        return ""

    def _resolve_type_name(self, name: str) -> str | None:
        if not name:
            return None
        head, _, rest = name.partition(".")
        if head in self._imports:
            base = self._imports[head]
            return f"{base}${rest.replace('.', '$')}" if rest else base
        if head in self._declared:
            base = self._declared[head]
            return f"{base}${rest.replace('.', '$')}" if rest else base
        if rest and head[:1].islower():
            # already fully qualified
            return name
        return f"{self._package}.{name}" if self._package else name

    # ---- Annotations ----

    def _annotations(self, node, source) -> dict[str, dict[str, Any]]:
        annotations: dict[str, dict[str, Any]] = {}
        for child in node.children:
            if child.type != "modifiers":
                continue
            for sub in child.children:
                if sub.type in ("annotation", "marker_annotation"):
                    name, values = self._annotation(sub, source)
                    annotations.setdefault(name, values)
        return annotations

    def _annotation(self, node, source) -> tuple[str, dict[str, Any]]:
        name = self.node_text(node.child_by_field_name("name"), source).rsplit(".", 1)[-1]
        values: dict[str, Any] = {}
        args = node.child_by_field_name("arguments")
        if args is not None:
            for arg in args.named_children:
                if arg.type == "element_value_pair":
                    key = self.node_text(arg.child_by_field_name("key"), source)
                    values[key] = self._element_value(arg.child_by_field_name("value"), source)
                elif arg.type not in ("comment", "line_comment", "block_comment"):
                    values["value"] = self._element_value(arg, source)
        return name, values

    def _element_value(self, node, source) -> Any:
        if node is None:
            return None
        kind = node.type
        if kind == "string_literal":
            return _unquote(self.node_text(node, source))
        if kind == "true":
            return True
        if kind == "false":
            return False
        if kind in ("decimal_integer_literal", "hex_integer_literal", "octal_integer_literal"):
            return _parse_int(self.node_text(node, source))
        if kind == "unary_expression":
            text = self.node_text(node, source).replace(" ", "")
            if text.startswith("-") and text[1:].isdigit():
                return -int(text[1:])
        if kind == "element_value_array_initializer":
            return [
                self._element_value(child, source)
                for child in node.named_children
                if child.type not in ("comment", "line_comment", "block_comment")
            ]
        if kind == "class_literal" and node.named_children:
            return self._resolve_type_name(self.node_text(node.named_children[0], source))
        if kind in ("annotation", "marker_annotation"):
            return self._annotation(node, source)[1]
        if kind == "binary_expression":
            parts = [self._element_value(child, source) for child in node.named_children]
            if parts and all(isinstance(p, str) for p in parts):
                return "".join(parts)
        if kind == "parenthesized_expression" and node.named_children:
            return self._element_value(node.named_children[0], source)
        return self.node_text(node, source)


def _unquote(text: str) -> str:
    if text.startswith('"""') and text.endswith('"""'):
        return text[3:-3]
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        text = text[1:-1]
    return text.replace('\\"', '"').replace("\\\\", "\\")


def _parse_int(text: str) -> int | str:
    cleaned = text.replace("_", "").rstrip("lL")
    try:
        return int(cleaned, 0)
    except ValueError:
        return text
