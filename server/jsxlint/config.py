from typing import Set, Tuple

RULE_ID = "jsx-no-undef"
DOCS_URL = "https://github.com/solidjs-community/eslint-plugin-solid/blob/main/docs/jsx-no-undef.md"

# Currently all of the control flow components are from 'solid-js'.
AUTO_COMPONENTS: Tuple[str, ...] = ("Show", "For", "Index", "Switch", "Match")
SOURCE_MODULE = "solid-js"

# The directive marker in `<div use:tooltip />`.
DIRECTIVE_NAMESPACE = "use"

IGNORE_DIRS: Set[str] = {
    '.git',
    'node_modules',
    'venv',
    '.venv',
    '__pycache__',
    'dist',
    'build',
    '.next',
    'coverage',
    '.idea',
    '.vscode',
    'target',
    'out',
    'android',
    'ios',
}

IGNORE_FILES: Set[str] = {
    'package-lock.json', 'yarn.lock', 'pnpm-lock.yaml',
}

# Files ending in `.d.ts` hold declarations only and never contain JSX.
IGNORE_SUFFIXES: Tuple[str, ...] = ('.d.ts', '.min.js')

TSX_SUFFIXES: Set[str] = {'.tsx', '.jsx', '.js', '.mjs', '.cjs'}
TYPESCRIPT_SUFFIXES: Set[str] = {'.ts', '.mts', '.cts'}
LINTABLE_SUFFIXES: Set[str] = TSX_SUFFIXES | TYPESCRIPT_SUFFIXES

# Ambient bindings placed in the global scope unless the caller supplies its own list.
DEFAULT_GLOBALS: Set[str] = {
    # JS/TS builtins
    "console",
    "Math",
    "JSON",
    "Promise",
    "Array",
    "String",
    "Number",
    "Boolean",
    "Date",
    "RegExp",
    "Set",
    "Map",
    "WeakMap",
    "WeakSet",
    "Error",
    "Symbol",
    "BigInt",
    "Intl",
    "Proxy",
    "Reflect",
    "Object",
    # Environment / Global
    "window",
    "document",
    "globalThis",
    "navigator",
    "location",
    "history",
    "performance",
    "fetch",
    "URL",
    "setTimeout",
    "clearTimeout",
    "setInterval",
    "clearInterval",
    "requestAnimationFrame",
    "cancelAnimationFrame",
    "localStorage",
    "sessionStorage",
    # Constants
    "undefined",
    "NaN",
    "Infinity",
}
