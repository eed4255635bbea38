from __future__ import annotations

from typing import List

from jsxlint.services.scope_manager import Scope, Variable

# `this` shows up as a tag root in `<this.Foo />` and is valid in any scope.
THIS_KEYWORD = "this"


def scope_upper_bound(source_type: str, allow_globals: bool) -> str:
    """
    Scope type at which upward resolution stops.

    Inside a module, ambient globals are out of reach unless the caller opts
    into them.
    """
    return "module" if not allow_globals and source_type == "module" else "global"


def wrapper_scopes(scope: Scope) -> List[Scope]:
    """
    Some parsers wrap top-level code in one or two synthetic scopes; peek into
    the first child and first grandchild of the boundary scope so names declared
    at the nominal top level still resolve. Returning [] drops the shim.
    """
    out: List[Scope] = []
    if scope.child_scopes:
        child = scope.child_scopes[0]
        out.append(child)
        if child.child_scopes:
            out.append(child.child_scopes[0])
    return out


def visible_variables(scope: Scope, upper_bound: str) -> List[Variable]:
    variables = list(scope.variables)
    while scope.type != upper_bound and scope.type != "global" and scope.upper is not None:
        scope = scope.upper
        variables.extend(scope.variables)
    for extra in wrapper_scopes(scope):
        variables.extend(extra.variables)
    return variables


def is_defined(name: str, scope: Scope, upper_bound: str) -> bool:
    if name == THIS_KEYWORD:
        return True
    return any(variable.name == name for variable in visible_variables(scope, upper_bound))
