import argparse
import logging
import os
import threading
import time
import webbrowser
from pathlib import Path

import uvicorn

from jsxlint.models import FileLintResult, LintSettings, RuleOptions
from jsxlint.services import analysis


def _open_browser_later(url: str, delay: float = 1.0) -> None:
    """
    Open the default web browser after a short delay.

    This lets the server start first so the page is reachable.
    """

    def _worker() -> None:
        time.sleep(delay)
        try:
            webbrowser.open(url)
        except Exception:
            # Don't crash the CLI if opening the browser fails (e.g. headless env)
            pass

    thread = threading.Thread(target=_worker, daemon=True)
    thread.start()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsxlint",
        description=(
            "Report JSX tags and custom directives that refer to undefined bindings, "
            "and auto-import Solid control-flow components."
        ),
    )
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to lint (default: current directory).",
    )
    parser.add_argument("--fix", action="store_true", help="Write fixes back to the files.")
    parser.add_argument(
        "--allow-globals",
        action="store_true",
        help="Treat global-scope bindings as defined inside modules.",
    )
    parser.add_argument(
        "--no-auto-import",
        action="store_true",
        help="Report undefined control-flow components instead of importing them.",
    )
    parser.add_argument(
        "--typescript",
        action="store_true",
        help="Leave plain undefined identifiers to the TypeScript compiler.",
    )
    parser.add_argument(
        "--script",
        action="store_true",
        help="Parse sources as scripts rather than ES modules.",
    )
    parser.add_argument(
        "--global",
        dest="globals",
        action="append",
        default=None,
        metavar="NAME",
        help="Add an ambient global binding (repeatable).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log progress while linting.")
    parser.add_argument("--serve", action="store_true", help="Start the HTTP lint service instead.")
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface to bind the server to (default: 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the server on (default: 8000).",
    )
    parser.add_argument("--open", action="store_true", help="Open the API docs in a browser.")
    return parser


def settings_from_args(args: argparse.Namespace) -> LintSettings:
    settings = LintSettings(
        source_type="script" if args.script else "module",
        options=RuleOptions(
            allow_globals=args.allow_globals,
            auto_import=not args.no_auto_import,
            typescript_enabled=args.typescript,
        ),
    )
    if args.globals:
        settings.globals = sorted(set(settings.globals) | set(args.globals))
    return settings


def format_result(result: FileLintResult) -> list[str]:
    if result.error:
        return [f"{result.filename}: error: {result.error}"]
    return [
        f"{result.filename}:{d.line}:{d.column + 1}  {d.message}  ({d.message_id})"
        for d in result.diagnostics
    ]


def _serve(args: argparse.Namespace) -> None:
    url = f"http://{args.host}:{args.port}"
    print(f"🚀 Starting server at {url}")
    print("   Press Ctrl+C to stop.")

    if args.open:
        _open_browser_later(f"{url}/docs")

    uvicorn.run(
        "jsxlint.main:app",
        host=args.host,
        port=args.port,
        reload=False,
    )


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the CLI.

    Lints the given paths and prints one line per diagnostic. Returns 1 when
    any diagnostic (or per-file error) remains, 0 otherwise.
    """
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    if args.serve:
        _serve(args)
        return 0

    settings = settings_from_args(args)
    results: list[FileLintResult] = []
    for raw_path in args.paths:
        target_path = Path(os.path.abspath(raw_path))
        if not target_path.exists():
            raise SystemExit(f"Path does not exist: {target_path}")
        if target_path.is_file():
            results.append(analysis.lint_single_file(str(target_path), settings, args.fix))
        else:
            results.extend(analysis.lint_codebase(target_path, settings, args.fix))

    problems = 0
    for result in results:
        has_fixes = any(d.fix is not None for d in result.diagnostics)
        if args.fix and has_fixes and result.output is not None:
            Path(result.filename).write_text(result.output, encoding="utf-8")
            # Fixed diagnostics no longer apply; report what the fixed text still has.
            remaining = analysis.lint_source(result.output, result.filename, settings)
            result = result.model_copy(update={"diagnostics": remaining})
        for line in format_result(result):
            print(line)
        problems += len(result.diagnostics) + (1 if result.error else 0)

    if problems:
        print(f"❌ {problems} problem(s) found")
        return 1
    print("✅ No problems found")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
