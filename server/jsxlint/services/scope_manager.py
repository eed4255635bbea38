from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from tree_sitter import Node, Tree

FUNCTION_NODE_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
}

CLASS_NODE_TYPES = {
    "class_declaration",
    "abstract_class_declaration",
    "class",
}

# Scopes that own `var` declarations.
VARIABLE_SCOPE_TYPES = {"function", "module", "global"}


@dataclass(eq=False)
class Variable:
    name: str
    kind: str  # 'import', 'var', 'let', 'const', 'function', 'class', 'param', 'catch', 'type', 'enum', 'namespace', 'global'
    # Defining identifier; None for configured globals.
    node: Optional[Node] = None


@dataclass(eq=False)
class Scope:
    type: str  # 'global', 'module', 'function', 'class', 'block', 'for', 'catch', 'switch'
    block: Optional[Node]
    upper: Optional["Scope"] = None
    variables: List[Variable] = field(default_factory=list)
    child_scopes: List["Scope"] = field(default_factory=list)

    def define(self, name: str, kind: str, node: Optional[Node] = None) -> None:
        if name:
            self.variables.append(Variable(name=name, kind=kind, node=node))

    def names(self) -> List[str]:
        return [v.name for v in self.variables]


class ScopeManager:
    def __init__(self, global_scope: Scope, scope_by_block: Dict[int, Scope]):
        self.global_scope = global_scope
        self._scope_by_block = scope_by_block

    @property
    def scopes(self) -> List[Scope]:
        out: List[Scope] = []
        pending = [self.global_scope]
        while pending:
            scope = pending.pop()
            out.append(scope)
            pending.extend(reversed(scope.child_scopes))
        return out

    def acquire(self, node: Node) -> Scope:
        """Return the innermost scope enclosing `node`."""
        curr: Optional[Node] = node
        while curr is not None:
            scope = self._scope_by_block.get(curr.id)
            if scope is not None:
                return scope
            curr = curr.parent
        return self.global_scope


class ScopeAnalyzer:
    """
    Build a lexical scope graph for a TS/TSX syntax tree.

    The graph mirrors what an ESLint scope manager produces for the same
    source: a `global` scope holding ambient names, a `module` scope for
    module files, and nested function/class/block scopes in document order.
    """

    def __init__(self, source_type: str = "module", globals: Iterable[str] = ()):
        self.source_type = source_type
        self.globals = list(globals)
        self.scope_by_block: Dict[int, Scope] = {}
        self.current_scope_stack: List[Scope] = []

    def analyze(self, tree: Tree) -> ScopeManager:
        root = tree.root_node

        # Reset state
        self.scope_by_block = {}
        self.current_scope_stack = []

        global_scope = Scope(type="global", block=root)
        for name in self.globals:
            global_scope.define(name, "global")
        self.current_scope_stack.append(global_scope)

        if self.source_type == "module":
            module_scope = Scope(type="module", block=root, upper=global_scope)
            global_scope.child_scopes.append(module_scope)
            self.current_scope_stack.append(module_scope)
            self.scope_by_block[root.id] = module_scope
        else:
            self.scope_by_block[root.id] = global_scope

        for child in root.children:
            self._traverse(child)

        return ScopeManager(global_scope, self.scope_by_block)

    def _traverse(self, node: Node) -> None:
        scope_created = False
        if self._is_scope_boundary(node):
            new_scope = Scope(
                type=self._get_scope_type(node),
                block=node,
                upper=self.current_scope_stack[-1],
            )
            self.current_scope_stack[-1].child_scopes.append(new_scope)
            self.current_scope_stack.append(new_scope)
            self.scope_by_block[node.id] = new_scope
            scope_created = True

        self._handle_definitions(node)

        for child in node.children:
            self._traverse(child)

        if scope_created:
            self.current_scope_stack.pop()

    def _is_scope_boundary(self, node: Node) -> bool:
        # Keyword tokens (`function`, `class`) share their type names with real nodes.
        if not node.is_named:
            return False
        if node.type in FUNCTION_NODE_TYPES or node.type in CLASS_NODE_TYPES:
            return True
        if node.type == "statement_block":
            # Function and catch bodies share the scope of their owner.
            parent = node.parent
            if parent is not None and (
                parent.type in FUNCTION_NODE_TYPES or parent.type == "catch_clause"
            ):
                return False
            return True
        return node.type in {
            "for_statement",
            "for_in_statement",
            "catch_clause",
            "switch_statement",
        }

    def _get_scope_type(self, node: Node) -> str:
        if node.type in FUNCTION_NODE_TYPES:
            return "function"
        if node.type in CLASS_NODE_TYPES:
            return "class"
        if node.type in {"for_statement", "for_in_statement"}:
            return "for"
        if node.type == "catch_clause":
            return "catch"
        if node.type == "switch_statement":
            return "switch"
        return "block"

    def _current(self) -> Scope:
        return self.current_scope_stack[-1]

    def _enclosing(self) -> Scope:
        # Scope outside the one `node` just opened (e.g. where a function's name lives).
        if len(self.current_scope_stack) > 1:
            return self.current_scope_stack[-2]
        return self.current_scope_stack[0]

    def _variable_scope(self) -> Scope:
        for scope in reversed(self.current_scope_stack):
            if scope.type in VARIABLE_SCOPE_TYPES:
                return scope
        return self.current_scope_stack[0]

    def _define(self, scope: Scope, name_node: Optional[Node], kind: str) -> None:
        if name_node is None:
            return
        scope.define(name_node.text.decode("utf-8", errors="ignore"), kind, name_node)

    def _define_pattern(self, scope: Scope, pattern: Optional[Node], kind: str) -> None:
        if pattern is None:
            return
        for ident in collect_pattern_identifiers(pattern):
            self._define(scope, ident, kind)

    def _handle_definitions(self, node: Node) -> None:
        if not node.is_named:
            return
        t = node.type

        if t == "import_statement":
            self._handle_import(node)

        elif t == "variable_declarator":
            declaration = node.parent
            kind = "var"
            if declaration is not None and declaration.type == "lexical_declaration":
                kind_node = declaration.child_by_field_name("kind")
                if kind_node is None and declaration.children:
                    kind_node = declaration.children[0]
                kind = kind_node.type if kind_node is not None else "let"
            scope = self._variable_scope() if kind == "var" else self._current()
            self._define_pattern(scope, node.child_by_field_name("name"), kind)

        elif t in {"required_parameter", "optional_parameter"}:
            # Parameters of signatures and function types bind nothing.
            params = node.parent
            owner = params.parent if params is not None else None
            if owner is None or owner.type not in FUNCTION_NODE_TYPES:
                return
            pattern = node.child_by_field_name("pattern")
            if pattern is None and node.named_children:
                pattern = node.named_children[0]
            self._define_pattern(self._current(), pattern, "param")

        elif t == "arrow_function":
            # `item => ...` has a bare identifier parameter.
            param = node.child_by_field_name("parameter")
            if param is not None:
                self._define(self._current(), param, "param")

        elif t == "catch_clause":
            self._define_pattern(self._current(), node.child_by_field_name("parameter"), "catch")

        elif t in {"function_declaration", "generator_function_declaration"}:
            self._define(self._enclosing(), node.child_by_field_name("name"), "function")

        elif t in {"function_expression", "function", "generator_function"}:
            # A named function expression can refer to itself.
            self._define(self._current(), node.child_by_field_name("name"), "function")

        elif t == "function_signature":
            # `declare function Foo(): JSX.Element;` and overload signatures.
            self._define(self._current(), node.child_by_field_name("name"), "function")

        elif t in {"class_declaration", "abstract_class_declaration"}:
            name_node = node.child_by_field_name("name")
            self._define(self._enclosing(), name_node, "class")
            self._define(self._current(), name_node, "class")

        elif t == "class":
            self._define(self._current(), node.child_by_field_name("name"), "class")

        elif t == "for_in_statement":
            kind = next(
                (c.type for c in node.children if c.type in {"const", "let", "var"}),
                None,
            )
            if kind is not None:
                scope = self._variable_scope() if kind == "var" else self._current()
                self._define_pattern(scope, node.child_by_field_name("left"), kind)

        elif t == "type_parameter":
            # Generic parameters of functions and classes live in the scope they open.
            params = node.parent
            owner = params.parent if params is not None else None
            if owner is not None and (owner.type in FUNCTION_NODE_TYPES or owner.type in CLASS_NODE_TYPES):
                self._define(self._current(), node.child_by_field_name("name"), "type")

        elif t == "enum_declaration":
            self._define(self._current(), node.child_by_field_name("name"), "enum")

        elif t in {"interface_declaration", "type_alias_declaration"}:
            self._define(self._current(), node.child_by_field_name("name"), "type")

        elif t == "internal_module":
            name_node = node.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier":
                self._define(self._current(), name_node, "namespace")

    def _handle_import(self, node: Node) -> None:
        scope = self._current()

        # import Foo = require("./foo")
        require_clause = next((c for c in node.children if c.type == "import_require_clause"), None)
        if require_clause is not None:
            name_node = next((c for c in require_clause.children if c.type == "identifier"), None)
            self._define(scope, name_node, "import")
            return

        clause = next((c for c in node.children if c.type == "import_clause"), None)
        if clause is None:
            return

        for child in clause.children:
            # Default import: import Foo from "x"
            if child.type == "identifier":
                self._define(scope, child, "import")

            # Namespace import: import * as ns from "x"
            elif child.type == "namespace_import":
                name_node = next((c for c in child.children if c.type == "identifier"), None)
                self._define(scope, name_node, "import")

            # Named imports: import { A, B as C, type T } from "x"
            elif child.type == "named_imports":
                for spec in child.children:
                    if spec.type != "import_specifier":
                        continue
                    local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                    self._define(scope, local, "import")


def collect_pattern_identifiers(n: Node) -> List[Node]:
    """Return the identifiers a binding pattern introduces, in source order."""
    idents: List[Node] = []

    def walk(x: Node) -> None:
        # Plain identifiers and `{ extensions }` shorthand bindings.
        if x.type in {"identifier", "shorthand_property_identifier_pattern"}:
            idents.append(x)
            return

        # For `{ key: value }` patterns, only the value side introduces bindings.
        if x.type == "pair_pattern":
            value = x.child_by_field_name("value")
            if value is not None:
                walk(value)
            return

        # `x = 1` / `{ x = 1 }`: the default value is an expression, not a binding.
        if x.type in {"assignment_pattern", "object_assignment_pattern"}:
            left = x.child_by_field_name("left")
            if left is not None:
                walk(left)
            return

        # Skip contexts where identifiers are not bindings.
        if x.type in {
            "type_annotation",
            "member_expression",
            "subscript_expression",
            "call_expression",
            "property_identifier",
            "this",
        }:
            return

        for c in x.named_children:
            walk(c)

    walk(n)
    return idents


def analyze_scopes(tree: Tree, source_type: str = "module", globals: Iterable[str] = ()) -> ScopeManager:
    return ScopeAnalyzer(source_type=source_type, globals=globals).analyze(tree)
