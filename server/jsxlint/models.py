from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from jsxlint.config import DEFAULT_GLOBALS


class RuleOptions(BaseModel):
    allow_globals: bool = Field(
        default=False,
        alias="allowGlobals",
        description="When true, the rule will consider the global scope when checking for defined components.",
    )
    auto_import: bool = Field(
        default=True,
        alias="autoImport",
        description='Automatically import certain components from `"solid-js"` if they are undefined.',
    )
    typescript_enabled: bool = Field(
        default=False,
        alias="typescriptEnabled",
        description="Adjusts behavior not to conflict with TypeScript's type checking.",
    )

    model_config = {
        "populate_by_name": True,
        "extra": "forbid",
    }


class LintSettings(BaseModel):
    source_type: Literal["module", "script"] = Field(default="module", alias="sourceType")
    # Names bound in the global scope (browser/ES environment by default).
    globals: List[str] = Field(default_factory=lambda: sorted(DEFAULT_GLOBALS))
    options: RuleOptions = Field(default_factory=RuleOptions)

    model_config = {
        "populate_by_name": True,
        "extra": "forbid",
    }


class Fix(BaseModel):
    # Character offsets into the source; start == end means an insertion.
    range: Tuple[int, int]
    text: str


class Diagnostic(BaseModel):
    rule_id: str = Field(alias="ruleId")
    message_id: str = Field(alias="messageId")
    message: str
    line: int  # 1-based
    column: int  # 0-based
    end_line: int = Field(alias="endLine")
    end_column: int = Field(alias="endColumn")
    data: Dict[str, str] = Field(default_factory=dict)
    fix: Optional[Fix] = None

    model_config = {
        "populate_by_name": True
    }


class FileLintResult(BaseModel):
    filename: str
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    error: Optional[str] = None
    # Fixed source text, only present when fixes were requested.
    output: Optional[str] = None


class LintRequest(BaseModel):
    source: str
    filename: str = "input.tsx"
    settings: LintSettings = Field(default_factory=LintSettings)
    fix: bool = False
