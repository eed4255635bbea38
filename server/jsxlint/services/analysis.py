import concurrent.futures
import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional

from pathspec import PathSpec

from jsxlint.config import IGNORE_DIRS, IGNORE_FILES, IGNORE_SUFFIXES, LINTABLE_SUFFIXES
from jsxlint.models import Diagnostic, FileLintResult, LintSettings
from jsxlint.services import jsx_no_undef
from jsxlint.services.auto_import import apply_fixes
from jsxlint.services.parsing import parse_source

logger = logging.getLogger(__name__)

FILE_TIMEOUT_SECONDS = 5


def find_repo_root(start_path: Path) -> Path:
    """Nearest directory at or above `start_path` holding `.git`, else `start_path` itself."""
    start = start_path.resolve()
    return next((d for d in (start, *start.parents) if (d / ".git").exists()), start)


def is_lintable(path: Path) -> bool:
    name = path.name.lower()
    if name in IGNORE_FILES or name.endswith(IGNORE_SUFFIXES):
        return False
    return path.suffix.lower() in LINTABLE_SUFFIXES


def lint_source(
    source: str,
    filename: str = "input.tsx",
    settings: Optional[LintSettings] = None,
) -> List[Diagnostic]:
    """Lint one source text. Each call owns all of its state."""
    parsed = parse_source(source, filename)
    return jsx_no_undef.check(parsed, settings)


def lint_file(file_path: str, settings: Optional[LintSettings] = None, fix: bool = False) -> FileLintResult:
    source = Path(file_path).read_text(encoding="utf-8")
    diagnostics = lint_source(source, file_path, settings)
    result = FileLintResult(filename=file_path, diagnostics=diagnostics)
    if fix:
        result.output = apply_fixes(source, diagnostics)
    return result


def lint_single_file(file_path: str, settings: Optional[LintSettings] = None, fix: bool = False) -> FileLintResult:
    """
    Wrapper to lint a single file safely.
    Must be top-level for multiprocessing pickling.
    """
    try:
        return lint_file(file_path, settings, fix)
    except Exception as e:
        # Return error info instead of crashing
        return FileLintResult(filename=file_path, error=str(e))


def _gitignore_patterns(gitignore: Path, base_rel: str) -> Iterator[str]:
    """
    Yield the patterns of one .gitignore file rewritten relative to the repo root.

    `base_rel` is the POSIX path of the file's directory below the root ("" at
    the root itself). Patterns with a slash before their last character are
    anchored to that directory; the rest match at any depth beneath it.
    """
    for raw in gitignore.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw.rstrip()
        if not line or line.startswith("#"):
            continue

        negated = line.startswith("!")
        body = line[1:] if negated else line
        anchored = "/" in body.rstrip("/")
        body = body.lstrip("/")

        if anchored:
            pattern = f"/{base_rel}/{body}" if base_rel else f"/{body}"
        else:
            pattern = f"/{base_rel}/**/{body}" if base_rel else f"**/{body}"
        yield f"!{pattern}" if negated else pattern


def _load_gitignore_spec(root_path: Path) -> tuple[Path, PathSpec | None]:
    """Merge every .gitignore in the repository that holds `root_path` into one spec."""
    repo_root = find_repo_root(root_path)
    patterns: list[str] = []

    for dirpath, dirnames, filenames in os.walk(repo_root):
        dirnames[:] = [d for d in dirnames if d not in IGNORE_DIRS]
        if ".gitignore" in filenames:
            rel = Path(dirpath).relative_to(repo_root).as_posix()
            patterns.extend(_gitignore_patterns(Path(dirpath) / ".gitignore", "" if rel == "." else rel))

    if not patterns:
        return repo_root, None
    return repo_root, PathSpec.from_lines("gitwildmatch", patterns)


def _is_gitignored(path: Path, ignore_root: Path, spec: PathSpec | None) -> bool:
    if spec is None:
        return False
    try:
        rel = path.relative_to(ignore_root)
    except ValueError:
        rel = path
    return spec.match_file(rel.as_posix())


def collect_files(root_path: Path) -> List[str]:
    """List the lintable files under `root_path`, honoring ignore rules."""
    if root_path.is_file():
        return [str(root_path)] if is_lintable(root_path) else []

    ignore_root, gitignore_spec = _load_gitignore_spec(root_path)
    files_to_lint: List[str] = []

    for root_dir, dirs, files in os.walk(root_path):
        root_dir_path = Path(root_dir)

        # Prune in place so ignored directories are never walked.
        dirs[:] = [
            d for d in dirs
            if d not in IGNORE_DIRS
            and not _is_gitignored(root_dir_path / d, ignore_root, gitignore_spec)
        ]

        for file in files:
            file_path = root_dir_path / file
            if not is_lintable(file_path):
                continue
            if _is_gitignored(file_path, ignore_root, gitignore_spec):
                continue
            files_to_lint.append(str(file_path))

    return sorted(files_to_lint)


def _run_file_lints(
    files_to_lint: List[str],
    settings: LintSettings,
    fix: bool,
    max_workers: int,
) -> List[FileLintResult]:
    results: List[FileLintResult] = []

    # Files share no state, so each one is an independent unit of work.
    with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as executor:
        future_to_file = {
            executor.submit(lint_single_file, f, settings, fix): f for f in files_to_lint
        }
        completed_count = 0
        total_count = len(files_to_lint)

        for future in concurrent.futures.as_completed(future_to_file):
            file = future_to_file[future]
            completed_count += 1
            try:
                result = future.result(timeout=FILE_TIMEOUT_SECONDS)
            except concurrent.futures.TimeoutError:
                logger.warning(f"❌ [{completed_count}/{total_count}] Timeout linting {file} (skipped)")
                continue
            except Exception as exc:
                logger.warning(f"❌ [{completed_count}/{total_count}] Exception linting {file}: {exc}")
                continue

            if result.error:
                logger.warning(f"❌ [{completed_count}/{total_count}] Error linting {file}: {result.error}")
            else:
                logger.info(f"✅ [{completed_count}/{total_count}] Linted {file}")
            results.append(result)

    return results


def lint_codebase(
    root_path: Path,
    settings: Optional[LintSettings] = None,
    fix: bool = False,
    max_workers: int = 4,
) -> List[FileLintResult]:
    settings = settings or LintSettings()
    logger.info(f"🔍 Scanning: {root_path}")

    files_to_lint = collect_files(root_path)
    logger.info(f"📂 Linting {len(files_to_lint)} source files...")
    if not files_to_lint:
        return []

    results = _run_file_lints(files_to_lint, settings, fix, max_workers)
    return sorted(results, key=lambda r: r.filename)
