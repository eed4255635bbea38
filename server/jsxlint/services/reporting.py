from __future__ import annotations

import re
from typing import Dict, Optional

from tree_sitter import Node

from jsxlint.config import RULE_ID
from jsxlint.models import Diagnostic, Fix
from jsxlint.services.parsing import ParsedSource

MESSAGES: Dict[str, str] = {
    "undefined": "'{{identifier}}' is not defined.",
    "customDirectiveUndefined": "Custom directive '{{identifier}}' is not defined.",
    "autoImport": "{{imports}} should be imported from '{{source}}'.",
}

_PLACEHOLDER = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")


def render_message(message_id: str, data: Dict[str, str]) -> str:
    """Fill `{{name}}` placeholders; unknown placeholders are left as written."""
    template = MESSAGES[message_id]
    return _PLACEHOLDER.sub(lambda m: data.get(m.group(1), m.group(0)), template)


def make_diagnostic(
    parsed: ParsedSource,
    node: Node,
    message_id: str,
    data: Dict[str, str],
    fix: Optional[Fix] = None,
) -> Diagnostic:
    line, column, end_line, end_column = parsed.position(node)
    return Diagnostic(
        rule_id=RULE_ID,
        message_id=message_id,
        message=render_message(message_id, data),
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
        data=data,
        fix=fix,
    )
