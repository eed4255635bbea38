from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from tree_sitter import Node

from jsxlint.models import Diagnostic, Fix
from jsxlint.services.parsing import ParsedSource
from jsxlint.services.reporting import make_diagnostic

logger = logging.getLogger(__name__)


def format_list(names: List[str]) -> str:
    """Render names as prose: 'A', 'A' and 'B', 'A', 'B', and 'C'."""
    if not names:
        return ""
    if len(names) == 1:
        return f"'{names[0]}'"
    if len(names) == 2:
        return f"'{names[0]}' and '{names[1]}'"
    head = ", ".join(f"'{n}'" for n in names[:-1])
    return f"{head}, and '{names[-1]}'"


def _has_type_keyword(node: Node) -> bool:
    return any(c.type == "type" and c.text == b"type" for c in node.children)


def import_source(node: Node) -> Optional[str]:
    source_node = node.child_by_field_name("source")
    if source_node is None or source_node.type != "string":
        return None
    # Drop the surrounding quotes only; the literal must match exactly.
    return source_node.text.decode("utf-8", errors="ignore")[1:-1]


def find_target_import(program: Node, module: str) -> Optional[Node]:
    """First top-level, non-type-only import of `module`."""
    for statement in program.named_children:
        if statement.type != "import_statement":
            continue
        if _has_type_keyword(statement):
            continue
        if import_source(statement) == module:
            return statement
    return None


def _import_clause(import_node: Node) -> Optional[Node]:
    return next((c for c in import_node.children if c.type == "import_clause"), None)


def imported_names(import_node: Node) -> List[str]:
    """Local names bound by the value (non-type) named specifiers of an import."""
    clause = _import_clause(import_node)
    if clause is None:
        return []
    names: List[str] = []
    for child in clause.children:
        if child.type != "named_imports":
            continue
        for spec in child.children:
            if spec.type != "import_specifier" or _has_type_keyword(spec):
                continue
            local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
            if local is not None:
                names.append(local.text.decode("utf-8", errors="ignore"))
    return names


def _insert_at(parsed: ParsedSource, byte_offset: int, text: str) -> Fix:
    offset = parsed.char_offset(byte_offset)
    return Fix(range=(offset, offset), text=text)


def _import_statement_text(module: str, names: List[str]) -> str:
    return f'import {{ {", ".join(names)} }} from "{module}";'


def append_imports(parsed: ParsedSource, import_node: Node, names: Iterable[str]) -> Optional[Fix]:
    """Extend an existing import statement with additional named specifiers."""
    existing = set(imported_names(import_node))
    to_add = [n for n in names if n not in existing]
    if not to_add:
        return None
    joined = ", ".join(to_add)

    clause = _import_clause(import_node)
    if clause is None:
        # import 'source' => import { B, C } from 'source'
        import_token = import_node.children[0]
        return _insert_at(parsed, import_token.end_byte, f" {{ {joined} }} from")

    named = next((c for c in clause.children if c.type == "named_imports"), None)
    if named is not None:
        specifiers = [c for c in named.children if c.type == "import_specifier"]
        if specifiers:
            # import A, { B } from 'source' => import A, { B, C, D } from 'source'
            return _insert_at(parsed, specifiers[-1].end_byte, f", {joined}")
        # import {} from 'source' => import { B, C } from 'source'
        brace = named.children[0]
        return _insert_at(parsed, brace.end_byte, f" {joined} ")

    default = next((c for c in clause.children if c.type == "identifier"), None)
    has_namespace = any(c.type == "namespace_import" for c in clause.children)
    if default is not None and not has_namespace:
        # import A from 'source' => import A, { B, C } from 'source'
        return _insert_at(parsed, default.end_byte, f", {{ {joined} }}")

    # `import * as ns` (with or without a default) cannot take named specifiers;
    # add a sibling import above it.
    module = import_source(import_node) or ""
    return _insert_at(parsed, import_node.start_byte, _import_statement_text(module, to_add) + "\n")


def _is_directive(statement: Node) -> bool:
    return (
        statement.type == "expression_statement"
        and len(statement.named_children) == 1
        and statement.named_children[0].type == "string"
    )


def insert_imports(parsed: ParsedSource, module: str, names: List[str]) -> Fix:
    """Insert `import { names } from "module";` at the top of the file."""
    program = parsed.root
    statement = _import_statement_text(module, names)

    first_import = next(
        (n for n in program.named_children if n.type == "import_statement"), None
    )
    if first_import is not None:
        return _insert_at(parsed, first_import.start_byte, statement + "\n")

    # Keep a hashbang and a directive prologue ("use client";) first.
    anchor: Optional[Node] = None
    for child in program.named_children:
        if child.type == "comment":
            continue
        if child.type == "hash_bang_line" or _is_directive(child):
            anchor = child
            continue
        break

    if anchor is not None:
        return _insert_at(parsed, anchor.end_byte, "\n" + statement)
    return _insert_at(parsed, 0, statement + "\n")


def build_auto_import(
    parsed: ParsedSource,
    missing: Iterable[str],
    module: str,
) -> Optional[Diagnostic]:
    """
    Turn the names collected during the scan into one `autoImport` diagnostic.

    The fix edits the first qualifying import of `module` when there is one,
    otherwise it inserts a new import statement at the top of the file.
    """
    names = list(missing)
    if not names:
        return None

    data = {"imports": format_list(names), "source": module}
    import_node = find_target_import(parsed.root, module)
    if import_node is not None:
        fix = append_imports(parsed, import_node, names)
        anchor = import_node
    else:
        fix = insert_imports(parsed, module, names)
        anchor = parsed.root

    logger.debug(f"Auto-importing {names} from {module} in {parsed.filename}")
    return make_diagnostic(parsed, anchor, "autoImport", data, fix)


def apply_fixes(source: str, diagnostics: Iterable[Diagnostic]) -> str:
    """
    Apply the fixes attached to `diagnostics` to `source`.

    Fixes are applied from the end of the text backwards so earlier offsets stay
    valid. A fix overlapping one already applied is skipped; re-running the lint
    on the output picks it up again.
    """
    fixes = sorted(
        (d.fix for d in diagnostics if d.fix is not None),
        key=lambda f: (f.range[0], f.range[1]),
        reverse=True,
    )
    output = source
    last_start: Optional[int] = None
    for fix in fixes:
        start, end = fix.range
        if last_start is not None and end > last_start:
            logger.info(f"Skipping overlapping fix at {start}-{end}")
            continue
        output = output[:start] + fix.text + output[end:]
        last_start = start
    return output
