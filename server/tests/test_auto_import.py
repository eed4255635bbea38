import pytest

from jsxlint.models import Diagnostic, Fix
from jsxlint.services.analysis import lint_source
from jsxlint.services.auto_import import (
    append_imports,
    apply_fixes,
    find_target_import,
    format_list,
    imported_names,
    insert_imports,
)
from jsxlint.services.parsing import parse_source


def _fix_source(source: str) -> str:
    return apply_fixes(source, lint_source(source, "test.tsx"))


@pytest.mark.parametrize(
    "names, expected",
    [
        ([], ""),
        (["Show"], "'Show'"),
        (["Show", "For"], "'Show' and 'For'"),
        (["Show", "For", "Switch"], "'Show', 'For', and 'Switch'"),
    ],
)
def test_format_list(names, expected):
    assert format_list(names) == expected


def test_find_target_import_skips_type_imports_and_other_modules():
    source = (
        'import type { Component } from "solid-js";\n'
        'import { render } from "solid-js/web";\n'
        "import { createSignal } from 'solid-js';\n"
        'import { onMount } from "solid-js";\n'
    )
    parsed = parse_source(source, "test.tsx")

    target = find_target_import(parsed.root, "solid-js")
    assert target is not None
    assert target.start_point[0] == 2
    assert imported_names(target) == ["createSignal"]


def test_find_target_import_none_when_module_not_imported():
    parsed = parse_source('import { render } from "solid-js/web";\n', "test.tsx")
    assert find_target_import(parsed.root, "solid-js") is None


def test_append_after_default_import():
    source = 'import Solid from "solid-js";\nconst v = <Show />;\n'
    assert _fix_source(source).startswith('import Solid, { Show } from "solid-js";\n')


def test_append_into_empty_braces():
    source = 'import {} from "solid-js";\nconst v = <Show />;\n'
    assert _fix_source(source).startswith('import { Show } from "solid-js";\n')


def test_append_to_side_effect_import():
    source = 'import "solid-js";\nconst v = <Show />;\n'
    assert _fix_source(source).startswith('import { Show } from "solid-js";\n')


def test_append_keeps_default_and_named_specifiers():
    source = 'import Solid, { createSignal } from "solid-js";\nconst v = <For />;\n'
    assert _fix_source(source).startswith('import Solid, { createSignal, For } from "solid-js";\n')


def test_aliased_specifier_does_not_bind_imported_name():
    source = 'import { Show as When } from "solid-js";\nconst v = <Show />;\n'
    assert _fix_source(source).startswith('import { Show as When, Show } from "solid-js";\n')


def test_namespace_import_gets_a_sibling_import():
    source = 'import * as Solid from "solid-js";\nconst v = <Show />;\n'
    fixed = _fix_source(source)
    assert fixed.startswith('import { Show } from "solid-js";\nimport * as Solid from "solid-js";\n')


def test_default_with_namespace_import_gets_a_sibling_import():
    source = 'import Solid, * as S from "solid-js";\nconst v = <Show />;\n'
    fixed = _fix_source(source)
    assert fixed.startswith('import { Show } from "solid-js";\nimport Solid, * as S from "solid-js";\n')
    assert not parse_source(fixed, "test.tsx").root.has_error


def test_append_skips_names_already_imported():
    source = 'import { Show } from "solid-js";\n'
    parsed = parse_source(source, "test.tsx")
    import_node = find_target_import(parsed.root, "solid-js")

    assert append_imports(parsed, import_node, ["Show"]) is None
    fix = append_imports(parsed, import_node, ["Show", "For"])
    assert fix is not None
    assert fix.text == ", For"


def test_insert_before_first_import():
    source = '// header\nimport { render } from "solid-js/web";\nconst v = <Show />;\n'
    fixed = _fix_source(source)
    assert fixed == (
        '// header\n'
        'import { Show } from "solid-js";\n'
        'import { render } from "solid-js/web";\n'
        'const v = <Show />;\n'
    )


def test_insert_after_hashbang():
    source = "#!/usr/bin/env node\nconst v = <Show />;\n"
    fixed = _fix_source(source)
    assert fixed == '#!/usr/bin/env node\nimport { Show } from "solid-js";\nconst v = <Show />;\n'


def test_insert_after_directive_prologue():
    source = '"use client";\nconst v = <Show />;\n'
    fixed = _fix_source(source)
    assert fixed == '"use client";\nimport { Show } from "solid-js";\nconst v = <Show />;\n'


def test_insert_offsets_are_character_based():
    source = '// café\nimport { x } from "./x";\n'
    parsed = parse_source(source, "test.tsx")
    fix = insert_imports(parsed, "solid-js", ["Show"])
    assert fix.range == (8, 8)
    assert source[8:].startswith("import")


def _diagnostic_with_fix(start: int, end: int, text: str) -> Diagnostic:
    return Diagnostic(
        rule_id="jsx-no-undef",
        message_id="autoImport",
        message="",
        line=1,
        column=0,
        end_line=1,
        end_column=0,
        fix=Fix(range=(start, end), text=text),
    )


def test_apply_fixes_applies_from_the_end_and_skips_overlaps():
    source = "abcdef"
    diagnostics = [
        _diagnostic_with_fix(0, 0, "<"),
        _diagnostic_with_fix(1, 4, "X"),
        _diagnostic_with_fix(2, 5, "Y"),
    ]
    # (2, 5) is applied first; (1, 4) overlaps it and is left out.
    assert apply_fixes(source, diagnostics) == "<abYf"


def test_apply_fixes_without_fixes_returns_source():
    assert apply_fixes("const v = <Foo />;", lint_source("const v = <Foo />;")) == "const v = <Foo />;"
