from pathlib import Path

from jsxlint import run
from jsxlint.services import analysis


def _sequential_runner(files_to_lint, settings, fix, max_workers):
    return [analysis.lint_single_file(f, settings, fix) for f in files_to_lint]


def test_cli_reports_undefined_component(tmp_path: Path, capsys) -> None:
    f = tmp_path / "App.tsx"
    f.write_text("const v = <Foo />;\n", encoding="utf-8")

    code = run.main([str(f)])

    out = capsys.readouterr().out
    assert code == 1
    assert f"{f}:1:12  'Foo' is not defined.  (undefined)" in out


def test_cli_typescript_flag_suppresses_undefined(tmp_path: Path, capsys) -> None:
    f = tmp_path / "App.tsx"
    f.write_text("const v = <Foo />;\n", encoding="utf-8")

    assert run.main([str(f), "--typescript"]) == 0
    assert "No problems found" in capsys.readouterr().out


def test_cli_global_flag_needs_allow_globals(tmp_path: Path) -> None:
    f = tmp_path / "App.tsx"
    f.write_text("const v = <Foo />;\n", encoding="utf-8")

    assert run.main([str(f), "--global", "Foo"]) == 1
    assert run.main([str(f), "--global", "Foo", "--allow-globals"]) == 0


def test_cli_fix_writes_import(tmp_path: Path, capsys) -> None:
    f = tmp_path / "App.tsx"
    f.write_text("export const App = () => <Show when={true}>hi</Show>;\n", encoding="utf-8")

    code = run.main([str(f), "--fix"])

    assert code == 0
    assert f.read_text(encoding="utf-8") == (
        'import { Show } from "solid-js";\n'
        "export const App = () => <Show when={true}>hi</Show>;\n"
    )


def test_cli_fix_leaves_unfixable_problems(tmp_path: Path, capsys) -> None:
    f = tmp_path / "App.tsx"
    original = "const v = <Foo />;\n"
    f.write_text(original, encoding="utf-8")

    assert run.main([str(f), "--fix"]) == 1
    assert f.read_text(encoding="utf-8") == original


def test_cli_lints_directories(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setattr(analysis, "_run_file_lints", _sequential_runner)
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.tsx").write_text("const a = <div use:drag />;\n", encoding="utf-8")
    (tmp_path / "src" / "b.tsx").write_text("const b = <span />;\n", encoding="utf-8")

    code = run.main([str(tmp_path), "--no-auto-import"])

    out = capsys.readouterr().out
    assert code == 1
    assert "Custom directive 'drag' is not defined." in out
    assert "b.tsx" not in out


def test_settings_from_args() -> None:
    args = run._build_parser().parse_args(
        ["--allow-globals", "--no-auto-import", "--typescript", "--script", "--global", "Foo"]
    )
    settings = run.settings_from_args(args)

    assert settings.source_type == "script"
    assert settings.options.allow_globals is True
    assert settings.options.auto_import is False
    assert settings.options.typescript_enabled is True
    assert "Foo" in settings.globals
    assert "window" in settings.globals
