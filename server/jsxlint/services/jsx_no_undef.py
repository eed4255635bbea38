"""
Disallow references to undefined variables in JSX. Handles custom directives.

The check runs in two phases over one file:

1. `collect` walks the tree once. Unbound tag roots and `use:` directives are
   reported straight away; unbound framework control-flow components
   (`<Show>`, `<For>`, ...) are gathered into a `MissingComponents` set instead.
2. `finalize` turns that set into a single `autoImport` diagnostic whose fix
   adds the names to an import of the framework module.

Adapted from eslint-plugin-react's jsx-no-undef rule (MIT).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from jsxlint.config import AUTO_COMPONENTS, DOCS_URL, RULE_ID, SOURCE_MODULE
from jsxlint.models import Diagnostic, LintSettings, RuleOptions
from jsxlint.services.auto_import import build_auto_import
from jsxlint.services.jsx_extractor import Candidate, Role, iter_candidates
from jsxlint.services.parsing import ParsedSource
from jsxlint.services.reporting import MESSAGES, make_diagnostic
from jsxlint.services.scope_manager import ScopeManager, analyze_scopes
from jsxlint.services.scope_resolver import is_defined, scope_upper_bound

RULE_META: Dict[str, Any] = {
    "id": RULE_ID,
    "type": "problem",
    "docs": {
        "description": "Disallow references to undefined variables in JSX. Handles custom directives.",
        "url": DOCS_URL,
    },
    "fixable": "code",
    "schema": [RuleOptions.model_json_schema(by_alias=True)],
    "messages": MESSAGES,
}


class MissingComponents:
    """Add-only, insertion-ordered set of auto-importable names for one file."""

    def __init__(self) -> None:
        self._names: Dict[str, None] = {}

    def add(self, name: str) -> bool:
        if name in self._names:
            return False
        self._names[name] = None
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)


@dataclass
class ScanResult:
    diagnostics: List[Diagnostic] = field(default_factory=list)
    missing_components: MissingComponents = field(default_factory=MissingComponents)


def collect(parsed: ParsedSource, scope_manager: ScopeManager, settings: LintSettings) -> ScanResult:
    options = settings.options
    upper_bound = scope_upper_bound(settings.source_type, options.allow_globals)
    result = ScanResult()

    for candidate in iter_candidates(parsed.root):
        scope = scope_manager.acquire(candidate.node)
        if is_defined(candidate.name, scope, upper_bound):
            continue
        _dispatch_unbound(parsed, candidate, options, result)

    return result


def _dispatch_unbound(
    parsed: ParsedSource,
    candidate: Candidate,
    options: RuleOptions,
    result: ScanResult,
) -> None:
    name = candidate.name
    if candidate.role is Role.COMPONENT and options.auto_import and name in AUTO_COMPONENTS:
        # Reported once, at the end of the file, together with the fix.
        result.missing_components.add(name)
    elif candidate.role is Role.CUSTOM_DIRECTIVE:
        # No type checker looks at directive names, so this is never suppressed.
        result.diagnostics.append(
            make_diagnostic(parsed, candidate.node, "customDirectiveUndefined", {"identifier": name})
        )
    elif not options.typescript_enabled:
        result.diagnostics.append(
            make_diagnostic(parsed, candidate.node, "undefined", {"identifier": name})
        )


def finalize(parsed: ParsedSource, missing: MissingComponents, settings: LintSettings) -> Optional[Diagnostic]:
    if not settings.options.auto_import:
        return None
    return build_auto_import(parsed, missing, SOURCE_MODULE)


def check(parsed: ParsedSource, settings: Optional[LintSettings] = None) -> List[Diagnostic]:
    """Run both phases on a parsed file and return its diagnostics in report order."""
    settings = settings or LintSettings()
    scope_manager = analyze_scopes(
        parsed.tree,
        source_type=settings.source_type,
        globals=settings.globals,
    )
    scan = collect(parsed, scope_manager, settings)

    diagnostics = list(scan.diagnostics)
    auto_import = finalize(parsed, scan.missing_components, settings)
    if auto_import is not None:
        diagnostics.append(auto_import)

    diagnostics.sort(key=lambda d: (d.line, d.column))
    return diagnostics
