from pathlib import Path

from fastapi.testclient import TestClient

from jsxlint.main import app
from jsxlint.services import analysis


def _client() -> TestClient:
    return TestClient(app)


def _sequential_runner(files_to_lint, settings, fix, max_workers):
    return [analysis.lint_single_file(f, settings, fix) for f in files_to_lint]


def test_api_status() -> None:
    resp = _client().get("/api-status")
    assert resp.status_code == 200
    assert "running" in resp.json()["message"]


def test_rule_metadata() -> None:
    resp = _client().get("/api/lint/rule")
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == "jsx-no-undef"
    assert data["messages"]["undefined"] == "'{{identifier}}' is not defined."


def test_lint_source_reports_camel_case_diagnostics() -> None:
    resp = _client().post("/api/lint", json={"source": "const v = <Foo />;"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["filename"] == "input.tsx"
    assert data["output"] is None
    [diag] = data["diagnostics"]
    assert diag["messageId"] == "undefined"
    assert diag["ruleId"] == "jsx-no-undef"
    assert diag["message"] == "'Foo' is not defined."
    assert (diag["line"], diag["column"]) == (1, 11)


def test_lint_source_honors_options() -> None:
    payload = {
        "source": "const v = <Foo />;",
        "settings": {"options": {"typescriptEnabled": True}},
    }
    resp = _client().post("/api/lint", json=payload)
    assert resp.status_code == 200
    assert resp.json()["diagnostics"] == []


def test_lint_source_with_fix_returns_output() -> None:
    payload = {"source": "<Show>{x}</Show>", "fix": True}
    resp = _client().post("/api/lint", json=payload)

    assert resp.status_code == 200
    data = resp.json()
    assert data["output"] == 'import { Show } from "solid-js";\n<Show>{x}</Show>'
    assert data["diagnostics"][0]["fix"]["range"] == [0, 0]


def test_lint_source_rejects_unknown_options() -> None:
    payload = {"source": "<Foo />", "settings": {"options": {"allowEverything": True}}}
    resp = _client().post("/api/lint", json=payload)
    assert resp.status_code == 422


def test_lint_file(tmp_path: Path) -> None:
    f = tmp_path / "App.tsx"
    f.write_text("export const App = () => <div use:sortable><Card /></div>;\n", encoding="utf-8")

    resp = _client().get(f"/api/lint/file?path={f}")

    assert resp.status_code == 200
    data = resp.json()
    assert data["filename"] == str(f)
    assert [d["messageId"] for d in data["diagnostics"]] == ["customDirectiveUndefined", "undefined"]


def test_lint_file_query_options(tmp_path: Path) -> None:
    f = tmp_path / "App.tsx"
    f.write_text("export const App = () => <Card />;\n", encoding="utf-8")

    resp = _client().get(f"/api/lint/file?path={f}&typescriptEnabled=true")

    assert resp.status_code == 200
    assert resp.json()["diagnostics"] == []


def test_lint_file_not_found(tmp_path: Path) -> None:
    resp = _client().get(f"/api/lint/file?path={tmp_path / 'missing.tsx'}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "File not found"


def test_lint_file_rejects_directories_and_other_files(tmp_path: Path) -> None:
    note = tmp_path / "note.txt"
    note.write_text("hello\n", encoding="utf-8")

    client = _client()
    assert client.get(f"/api/lint/file?path={tmp_path}").status_code == 400
    resp = client.get(f"/api/lint/file?path={note}")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unsupported file type"


def test_scan_directory(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(analysis, "_run_file_lints", _sequential_runner)
    (tmp_path / "a.tsx").write_text("const a = <Show />;\n", encoding="utf-8")
    (tmp_path / "b.jsx").write_text("const b = <div />;\n", encoding="utf-8")

    resp = _client().get(f"/api/lint/scan?path={tmp_path}")

    assert resp.status_code == 200
    data = resp.json()
    assert [Path(r["filename"]).name for r in data] == ["a.tsx", "b.jsx"]
    assert [d["messageId"] for d in data[0]["diagnostics"]] == ["autoImport"]
    assert data[1]["diagnostics"] == []


def test_scan_missing_path(tmp_path: Path) -> None:
    resp = _client().get(f"/api/lint/scan?path={tmp_path / 'nope'}")
    assert resp.status_code == 404
