"""Unused and missing import detection for documentation snippets.

Each snippet is parsed with Tree-sitter and walked once. Every identifier
occurrence is classified by the syntactic position it occupies:

* declaration - introduces a local name (variable, function, class,
  parameter, destructuring target, type parameter, catch binding)
* import-binding - a local name introduced by an import clause
* property-name - a member or key name that never refers to an outer binding
* usage - any other reference
* critical-usage - a usage implying a runtime dependency: call target,
  ``new`` target, ``await`` operand, tagged-template tag, or the base of a
  member/subscript access

This is an advisory lint. "Critical usage" and "capitalized JSX tag means an
importable component" are heuristics, and scopes are not modelled: a name
declared anywhere in the snippet (even as a parameter that shadows nothing
useful) suppresses ``missing-import`` for that name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple

from tree_sitter import Node

from .base import AnalysisContext, BaseAnalyzer
from ..core.allowlist import DEFAULT_GLOBALS
from ..core.errors import SnippetParseError
from ..core.issues import Issue, SnippetDiagnostic, MISSING_IMPORT, UNUSED_IMPORT
from ..core.loader import load_document
from ..core.parsing import parse_snippet
from ..core.snippets import Snippet, extract_snippets
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)

# node type -> field holding the expression the node is applied to
CHAIN_LINKS: Dict[str, str] = {
    "call_expression": "function",
    "member_expression": "object",
    "subscript_expression": "object",
}


class Role(str, Enum):
    """Role of one identifier occurrence."""
    DECLARATION = "declaration"
    IMPORT_BINDING = "import-binding"
    USAGE = "usage"
    CRITICAL_USAGE = "critical-usage"
    PROPERTY_NAME = "property-name"


@dataclass(frozen=True)
class IdentifierReference:
    """One identifier occurrence; ``row`` and ``column`` are 0-based."""
    name: str
    row: int
    column: int
    role: Role


@dataclass(frozen=True)
class ImportBinding:
    """A name bound by an import clause, with its module specifier."""
    local_name: str
    module_name: str
    row: int


@dataclass
class SnippetAnalysis:
    """Accumulators produced by one traversal of a snippet."""
    declared: Set[str] = field(default_factory=set)
    imports: List[ImportBinding] = field(default_factory=list)
    used: Dict[str, IdentifierReference] = field(default_factory=dict)
    critical: Dict[str, IdentifierReference] = field(default_factory=dict)
    references: List[IdentifierReference] = field(default_factory=list)
    has_syntax_errors: bool = False

    def unused_imports(self) -> List[ImportBinding]:
        """Import bindings never referenced, first binding per name."""
        seen: Set[str] = set()
        unused = []
        for binding in self.imports:
            if binding.local_name in self.used or binding.local_name in seen:
                continue
            seen.add(binding.local_name)
            unused.append(binding)
        return unused

    def missing_names(self, allowlist: FrozenSet[str] = DEFAULT_GLOBALS) -> List[IdentifierReference]:
        """Critical usages that are neither declared nor ambient."""
        return [
            ref for name, ref in self.critical.items()
            if name not in self.declared and name not in allowlist
        ]


def _text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def _string_value(node: Node) -> str:
    text = _text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


class ReferenceCollector:
    """Single-pass classifier dispatching on Tree-sitter node type.

    ``visit`` looks up ``visit_<node type>``; node types without a handler
    fall through to :meth:`generic_visit`, which walks the named children.
    Handlers decide the role of their direct children, so every rule about
    which position means what lives in one of the methods below.
    """

    def __init__(self) -> None:
        self.analysis = SnippetAnalysis()

    # -- recording -----------------------------------------------------

    def _record(self, node: Node, role: Role) -> None:
        name = _text(node)
        if not name:
            return
        ref = IdentifierReference(name, node.start_point[0], node.start_point[1], role)
        self.analysis.references.append(ref)
        if role in (Role.DECLARATION, Role.IMPORT_BINDING):
            self.analysis.declared.add(name)
        elif role in (Role.USAGE, Role.CRITICAL_USAGE):
            self.analysis.used.setdefault(name, ref)
            if role is Role.CRITICAL_USAGE:
                self.analysis.critical.setdefault(name, ref)

    def _critical(self, node: Node) -> None:
        """Visit a runtime-dependency position."""
        if node.type == "identifier":
            self._record(node, Role.CRITICAL_USAGE)
        else:
            self.visit(node)

    def _bind(self, node: Node, declare: bool) -> None:
        """Visit a binding target.

        With ``declare`` the names in the pattern are declarations; without
        it (destructuring assignment, bare ``for (x of ...)``) they are
        ordinary usages.
        """
        kind = node.type
        if kind in ("identifier", "type_identifier", "shorthand_property_identifier_pattern"):
            self._record(node, Role.DECLARATION if declare else Role.USAGE)
        elif kind in ("object_pattern", "array_pattern", "rest_pattern", "formal_parameters"):
            for child in node.named_children:
                self._bind(child, declare)
        elif kind == "pair_pattern":
            key = node.child_by_field_name("key")
            value = node.child_by_field_name("value")
            if key is not None:
                self.visit(key)
            if value is not None:
                self._bind(value, declare)
        elif kind in ("assignment_pattern", "object_assignment_pattern"):
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if left is not None:
                self._bind(left, declare)
            if right is not None:
                self.visit(right)
        elif kind in ("required_parameter", "optional_parameter"):
            self._visit_fields(node, declare=("pattern",))
        elif kind == "nested_identifier":
            # namespace A.B binds A
            if node.named_children:
                self._bind(node.named_children[0], declare)
        else:
            # obj.prop, arr[i], this, string module names
            self.visit(node)

    # -- dispatch ------------------------------------------------------

    def visit(self, node: Node) -> None:
        handler = getattr(self, f"visit_{node.type}", None)
        if handler is None:
            self.generic_visit(node)
        else:
            handler(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.named_children:
            self.visit(child)

    def _visit_fields(
        self,
        node: Node,
        declare: Tuple[str, ...] = (),
        critical: Tuple[str, ...] = (),
    ) -> None:
        declared = [c for f in declare for c in node.children_by_field_name(f)]
        critical_nodes = [c for f in critical for c in node.children_by_field_name(f)]
        for child in node.named_children:
            if child in declared:
                self._bind(child, declare=True)
            elif child in critical_nodes:
                self._critical(child)
            else:
                self.visit(child)

    # -- leaves --------------------------------------------------------

    def visit_identifier(self, node: Node) -> None:
        self._record(node, Role.USAGE)

    visit_type_identifier = visit_identifier
    visit_shorthand_property_identifier = visit_identifier

    def visit_property_identifier(self, node: Node) -> None:
        self._record(node, Role.PROPERTY_NAME)

    visit_private_property_identifier = visit_property_identifier

    def visit_shorthand_property_identifier_pattern(self, node: Node) -> None:
        self._record(node, Role.DECLARATION)

    def visit_statement_identifier(self, node: Node) -> None:
        # labels live in their own namespace
        pass

    def visit_jsx_namespace_name(self, node: Node) -> None:
        pass

    # -- imports and exports -------------------------------------------

    def visit_import_statement(self, node: Node) -> None:
        source = node.child_by_field_name("source")
        module_name = _string_value(source) if source is not None else ""
        for child in node.named_children:
            if child.type == "import_clause":
                self._import_clause(child, module_name)
            elif child.type == "import_require_clause":
                # import x = require("y")
                for part in child.named_children:
                    if part.type == "identifier":
                        self._record(part, Role.DECLARATION)
                        break

    def _import_clause(self, clause: Node, module_name: str) -> None:
        for child in clause.named_children:
            if child.type == "identifier":
                self._import_binding(child, module_name)
            elif child.type == "namespace_import":
                for part in child.named_children:
                    if part.type == "identifier":
                        self._import_binding(part, module_name)
            elif child.type == "named_imports":
                for specifier in child.named_children:
                    if specifier.type != "import_specifier":
                        continue
                    name = specifier.child_by_field_name("name")
                    alias = specifier.child_by_field_name("alias")
                    if alias is not None:
                        if name is not None:
                            self._record(name, Role.PROPERTY_NAME)
                        self._import_binding(alias, module_name)
                    elif name is not None:
                        self._import_binding(name, module_name)

    def _import_binding(self, node: Node, module_name: str) -> None:
        self._record(node, Role.IMPORT_BINDING)
        self.analysis.imports.append(ImportBinding(_text(node), module_name, node.start_point[0]))

    def visit_import_alias(self, node: Node) -> None:
        # import A = B.C
        children = node.named_children
        if children:
            self._bind(children[0], declare=True)
            for child in children[1:]:
                self.visit(child)

    def visit_export_statement(self, node: Node) -> None:
        if node.child_by_field_name("source") is not None:
            # re-exports name bindings of another module
            return
        self.generic_visit(node)

    def visit_export_specifier(self, node: Node) -> None:
        name = node.child_by_field_name("name")
        alias = node.child_by_field_name("alias")
        if name is not None:
            self.visit(name)
        if alias is not None:
            self._record(alias, Role.PROPERTY_NAME)

    # -- declarations --------------------------------------------------

    def _visit_named_declaration(self, node: Node) -> None:
        self._visit_fields(node, declare=("name",))

    visit_function_declaration = _visit_named_declaration
    visit_generator_function_declaration = _visit_named_declaration
    visit_function_expression = _visit_named_declaration
    visit_function = _visit_named_declaration
    visit_generator_function = _visit_named_declaration
    visit_function_signature = _visit_named_declaration
    visit_class_declaration = _visit_named_declaration
    visit_abstract_class_declaration = _visit_named_declaration
    visit_class = _visit_named_declaration
    visit_interface_declaration = _visit_named_declaration
    visit_type_alias_declaration = _visit_named_declaration
    visit_enum_declaration = _visit_named_declaration
    visit_internal_module = _visit_named_declaration
    visit_module = _visit_named_declaration
    visit_variable_declarator = _visit_named_declaration
    visit_type_parameter = _visit_named_declaration
    visit_index_signature = _visit_named_declaration
    visit_mapped_type_clause = _visit_named_declaration

    def visit_formal_parameters(self, node: Node) -> None:
        self._bind(node, declare=True)

    def visit_arrow_function(self, node: Node) -> None:
        # x => ... has a single ``parameter`` instead of ``parameters``
        self._visit_fields(node, declare=("parameter",))

    def visit_catch_clause(self, node: Node) -> None:
        self._visit_fields(node, declare=("parameter",))

    def visit_infer_type(self, node: Node) -> None:
        for child in node.named_children:
            if child.type == "type_identifier":
                self._record(child, Role.DECLARATION)
            else:
                self.visit(child)

    def visit_for_in_statement(self, node: Node) -> None:
        left = node.child_by_field_name("left")
        declare = node.child_by_field_name("kind") is not None
        for child in node.named_children:
            if left is not None and child == left:
                self._bind(child, declare=declare)
            else:
                self.visit(child)

    def visit_assignment_expression(self, node: Node) -> None:
        left = node.child_by_field_name("left")
        for child in node.named_children:
            if left is not None and child == left:
                self._bind(child, declare=False)
            else:
                self.visit(child)

    # -- runtime dependencies ------------------------------------------

    def _visit_chain(self, node: Node) -> None:
        """Visit a call/member/subscript chain such as ``a.b().c[d]``.

        The chain is followed down its ``function``/``object`` links in a
        loop, so long method chains do not deepen the recursion. The node at
        the bottom of the chain is in a critical position; the other
        children (arguments, property names, indices) are visited in source
        order afterwards.
        """
        links = []
        while node.type in CHAIN_LINKS:
            inner = node.child_by_field_name(CHAIN_LINKS[node.type])
            links.append((node, inner))
            if inner is None:
                break
            node = inner
        else:
            self._critical(node)
        for link, inner in reversed(links):
            for child in link.named_children:
                if child != inner:
                    self.visit(child)

    # tag`...` is a call with a template argument, so tagged templates land here too
    visit_call_expression = _visit_chain
    visit_member_expression = _visit_chain
    visit_subscript_expression = _visit_chain

    def visit_new_expression(self, node: Node) -> None:
        self._visit_fields(node, critical=("constructor",))

    def visit_await_expression(self, node: Node) -> None:
        children = node.named_children
        if children:
            self._critical(children[0])
            for child in children[1:]:
                self.visit(child)

    def visit_nested_type_identifier(self, node: Node) -> None:
        # A.B in a type: A is a reference, B a member name
        for child in node.named_children:
            if child == node.child_by_field_name("name"):
                self._record(child, Role.PROPERTY_NAME)
            else:
                self.visit(child)

    # -- JSX -----------------------------------------------------------

    def _jsx_element(self, node: Node) -> None:
        tag = node.child_by_field_name("name")
        for child in node.named_children:
            if tag is None or child != tag:
                self.visit(child)
            elif child.type == "identifier":
                name = _text(child)
                # <Box> names an importable component, <div> an intrinsic element
                self._record(child, Role.CRITICAL_USAGE if name[:1].isupper() else Role.USAGE)
            elif child.type in ("member_expression", "nested_identifier"):
                # <Tabs.Panel>: Tabs is the base of a member access
                base = child
                while base.type != "identifier" and base.named_children:
                    base = base.named_children[0]
                if base.type == "identifier":
                    self._record(base, Role.CRITICAL_USAGE)

    visit_jsx_opening_element = _jsx_element
    visit_jsx_self_closing_element = _jsx_element

    def visit_jsx_closing_element(self, node: Node) -> None:
        tag = node.child_by_field_name("name")
        if tag is not None and tag.type == "identifier":
            self._record(tag, Role.USAGE)


def collect_references(root: Node) -> SnippetAnalysis:
    """Classify every identifier under ``root``."""
    collector = ReferenceCollector()
    collector.visit(root)
    collector.analysis.has_syntax_errors = root.has_error
    return collector.analysis


class ImportUsageAnalyzer(BaseAnalyzer):
    """Reports unused imports and likely-missing imports in snippets."""

    name = "import_usage"

    def __init__(
        self,
        allowlist: FrozenSet[str] = DEFAULT_GLOBALS,
        skip_on_syntax_error: bool = False,
    ):
        self.allowlist = allowlist
        self.skip_on_syntax_error = skip_on_syntax_error

    def analyze(self, snippet: Snippet) -> SnippetAnalysis:
        """Parse and classify one snippet.

        Raises:
            SnippetParseError: if the snippet cannot be parsed, or contains
                syntax errors while ``skip_on_syntax_error`` is set
        """
        tree = parse_snippet(snippet.language_tag, snippet.body)
        analysis = collect_references(tree.root_node)
        if analysis.has_syntax_errors:
            if self.skip_on_syntax_error:
                raise SnippetParseError("snippet contains syntax errors")
            logger.debug(f"{snippet.file}:{snippet.start_line}: analyzing partially recovered syntax tree")
        return analysis

    def find_issues(self, snippet: Snippet, analysis: SnippetAnalysis) -> List[Issue]:
        """Derive the issues of one analyzed snippet."""
        issues = []
        for binding in analysis.unused_imports():
            issues.append(Issue(
                kind=UNUSED_IMPORT,
                file=snippet.file,
                line=snippet.start_line + binding.row,
                name=binding.local_name,
                module_name=binding.module_name,
            ))
        for ref in analysis.missing_names(self.allowlist):
            issues.append(Issue(
                kind=MISSING_IMPORT,
                file=snippet.file,
                line=snippet.start_line + ref.row,
                name=ref.name,
            ))
        return issues

    def check(self, snippet: Snippet) -> List[Issue]:
        return self.find_issues(snippet, self.analyze(snippet))

    def check_snippets(
        self,
        snippets: Iterable[Snippet],
        diagnostics: Optional[List[SnippetDiagnostic]] = None,
    ) -> Iterator[Issue]:
        """Check snippets one by one; a failing snippet is skipped, not fatal."""
        for snippet in snippets:
            try:
                issues = self.check(snippet)
            except (SnippetParseError, RecursionError) as e:
                message = str(e) or type(e).__name__
                logger.warning(f"Skipping {snippet.language_tag} snippet at {snippet.file}:{snippet.start_line}: {message}")
                if diagnostics is not None:
                    diagnostics.append(SnippetDiagnostic(
                        file=snippet.file,
                        line=snippet.start_line,
                        language=snippet.language_tag,
                        message=message,
                    ))
                continue
            yield from issues

    def run(self, ctx: AnalysisContext) -> Iterable[Issue]:
        """Check every snippet of every document in ``ctx``."""
        for path in ctx.documents:
            try:
                document = load_document(path)
            except OSError as e:
                logger.warning(f"Failed to read {path}: {e}")
                ctx.count("unreadable_documents")
                continue
            ctx.count("documents")
            snippets = extract_snippets(document)
            ctx.count("snippets", len(snippets))
            for issue in self.check_snippets(snippets, ctx.diagnostics):
                if not ctx.should_ignore_issue(issue.kind):
                    yield issue
