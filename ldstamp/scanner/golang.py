"""Go declaration extractor built on tree-sitter."""

from __future__ import annotations

from pathlib import Path

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser

from ldstamp.exceptions import ParseError
from ldstamp.scanner.registry import Declaration, SourceDeclarations, register_extractor

_GO_LANGUAGE = Language(tsgo.language())


class GoExtractor:
    """Extract variable declarations from Go source files."""

    language = "go"
    file_suffix = ".go"
    test_suffix = "_test.go"
    string_type = "string"

    def extract(self, file_path: Path, content: bytes) -> SourceDeclarations:
        # Parser instances are not shared between threads.
        parser = Parser(_GO_LANGUAGE)
        tree = parser.parse(content)
        root = tree.root_node
        if root.has_error:
            raise ParseError(str(file_path), f"syntax error at line {_first_error_line(root)}")

        package = None
        declarations: list[Declaration] = []
        for node in root.named_children:
            if node.type == "package_clause":
                package = self._package_name(node)
            elif node.type == "var_declaration":
                declarations.extend(self._var_declarations(node, top_level=True))

        if not package:
            raise ParseError(str(file_path), "missing package clause")
        return SourceDeclarations(package=package, declarations=declarations)

    def _package_name(self, clause: Node) -> str | None:
        for child in clause.named_children:
            if child.type in ("package_identifier", "identifier"):
                return child.text.decode()
        return None

    def _var_declarations(self, decl: Node, top_level: bool) -> list[Declaration]:
        """Flatten ``var x T`` and ``var ( ... )`` forms into declarations."""
        specs: list[Node] = []
        for child in decl.named_children:
            if child.type == "var_spec":
                specs.append(child)
            elif child.type == "var_spec_list":
                # Newer grammars wrap grouped specs in a list node.
                specs.extend(c for c in child.named_children if c.type == "var_spec")

        result: list[Declaration] = []
        for spec in specs:
            type_node = spec.child_by_field_name("type")
            type_name = self._type_name(type_node)
            for name_node in spec.children_by_field_name("name"):
                result.append(
                    Declaration(
                        name=name_node.text.decode(),
                        type_name=type_name,
                        top_level=top_level,
                    )
                )
        return result

    def _type_name(self, type_node: Node | None) -> str | None:
        if type_node is None:
            return None
        # Qualified and composite types keep their full text, e.g. "pkg.string".
        return type_node.text.decode()


def _first_error_line(node: Node) -> int:
    """Return the 1-based line of the first ERROR / missing node under *node*."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current.start_point[0] + 1
        stack.extend(reversed(current.children))
    return node.start_point[0] + 1


register_extractor(GoExtractor())
