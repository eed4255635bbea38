from pathlib import Path
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from jsxlint.models import Diagnostic, FileLintResult, LintRequest, LintSettings
from jsxlint.services import analysis, jsx_no_undef
from jsxlint.services.auto_import import apply_fixes

router = APIRouter(prefix="/api/lint", tags=["lint"])


class LintResponse(BaseModel):
    filename: str
    diagnostics: List[Diagnostic]
    output: str | None = None


@router.get("/rule")
async def get_rule() -> Dict[str, Any]:
    """Rule metadata: description, messages and the options schema."""
    return jsx_no_undef.RULE_META


@router.post("", response_model=LintResponse)
async def lint(request: LintRequest):
    """
    Lint a source text sent in the request body.
    With `fix` set, the response also carries the fixed source.
    """
    diagnostics = analysis.lint_source(request.source, request.filename, request.settings)
    output = apply_fixes(request.source, diagnostics) if request.fix else None
    return LintResponse(filename=request.filename, diagnostics=diagnostics, output=output)


def _settings_from_query(allow_globals: bool, auto_import: bool, typescript_enabled: bool) -> LintSettings:
    settings = LintSettings()
    settings.options.allow_globals = allow_globals
    settings.options.auto_import = auto_import
    settings.options.typescript_enabled = typescript_enabled
    return settings


@router.get("/file", response_model=FileLintResult)
async def lint_file(
    path: str = Query(..., description="Absolute path to the file"),
    allow_globals: bool = Query(False, alias="allowGlobals"),
    auto_import: bool = Query(True, alias="autoImport"),
    typescript_enabled: bool = Query(False, alias="typescriptEnabled"),
):
    file_path = Path(path)

    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    if not file_path.is_file():
        raise HTTPException(status_code=400, detail="Path is not a file")

    if not analysis.is_lintable(file_path):
        raise HTTPException(status_code=400, detail="Unsupported file type")

    settings = _settings_from_query(allow_globals, auto_import, typescript_enabled)
    try:
        return analysis.lint_file(str(file_path), settings)
    except (OSError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=500, detail=f"Failed to read file: {str(e)}")


@router.get("/scan", response_model=List[FileLintResult])
async def scan(
    path: str = Query(..., description="Directory (or file) to lint"),
    allow_globals: bool = Query(False, alias="allowGlobals"),
    auto_import: bool = Query(True, alias="autoImport"),
    typescript_enabled: bool = Query(False, alias="typescriptEnabled"),
):
    target_path = Path(path)
    if not target_path.exists():
        raise HTTPException(status_code=404, detail="Path not found")

    settings = _settings_from_query(allow_globals, auto_import, typescript_enabled)
    return analysis.lint_codebase(target_path, settings)
