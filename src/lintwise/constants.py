# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static tables driving repository profiling."""

from __future__ import annotations

from typing import Final

DEFAULT_MAX_DEPTH: Final[int] = 3

ALLOWED_HIDDEN_DIRS: Final[frozenset[str]] = frozenset({".github", ".vscode", ".trunk"})

ALWAYS_EXCLUDE_NAMES: Final[frozenset[str]] = frozenset(
    {
        "node_modules",
        ".git",
        ".svn",
        ".hg",
        "vendor",
        "target",
        "build",
        "dist",
        ".next",
        ".nuxt",
        "coverage",
        ".nyc_output",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".venv",
        "venv",
        ".idea",
        ".vscode",
        ".vs",
        "logs",
        "tmp",
        "temp",
    }
)

EXCLUDE_NAME_GLOBS: Final[tuple[str, ...]] = ("*.log",)

EXTENSION_LANGUAGES: Final[dict[str, str]] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".vue": "vue",
    ".svelte": "svelte",
    ".py": "python",
    ".pyw": "python",
    ".pyx": "python",
    ".java": "java",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".scala": "scala",
    ".groovy": "groovy",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".hxx": "cpp",
    ".cs": "csharp",
    ".vb": "vb",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "sass",
    ".less": "less",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".rbw": "ruby",
    ".php": "php",
    ".phtml": "php",
    ".swift": "swift",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".xml": "xml",
    ".toml": "toml",
    ".ini": "ini",
    ".sh": "shell",
    ".bash": "shell",
    ".zsh": "shell",
    ".fish": "shell",
    ".ps1": "powershell",
    ".md": "markdown",
    ".rst": "rst",
}

# Extension-less files recognised by name.
FILENAME_LANGUAGES: Final[dict[str, str]] = {
    "dockerfile": "dockerfile",
    "makefile": "shell",
    "configure": "shell",
    "install": "shell",
}
DOCKERFILE_PREFIX: Final[str] = "dockerfile."

# Never reported as primary languages.
DATA_LANGUAGES: Final[frozenset[str]] = frozenset({"json", "yaml", "toml", "xml", "ini", "markdown", "rst"})

PRIMARY_FILE_SHARE: Final[float] = 10.0
PRIMARY_MIN_FILES: Final[int] = 5
PRIMARY_LIMIT: Final[int] = 3
SECONDARY_FILE_SHARE: Final[float] = 2.0
SECONDARY_MIN_FILES: Final[int] = 1
SECONDARY_LIMIT: Final[int] = 5

# package.json dependency key -> frameworks it implies.
JAVASCRIPT_FRAMEWORK_KEYS: Final[tuple[tuple[str, tuple[str, ...]], ...]] = (
    ("react", ("react",)),
    ("@angular/core", ("angular",)),
    ("vue", ("vue",)),
    ("svelte", ("svelte",)),
    ("next", ("next", "react")),
    ("nuxt", ("nuxt", "vue")),
    ("gatsby", ("gatsby", "react")),
    ("express", ("express",)),
    ("fastify", ("fastify",)),
    ("koa", ("koa",)),
    ("nestjs", ("nestjs",)),
)

SubstringRules = tuple[tuple[str, str], ...]

_PYTHON_RULES: Final[SubstringRules] = (
    ("django", "django"),
    ("flask", "flask"),
    ("fastapi", "fastapi"),
    ("tornado", "tornado"),
    ("pyramid", "pyramid"),
)
_JAVA_RULES: Final[SubstringRules] = (
    ("spring", "spring"),
    ("springboot", "springboot"),
    ("quarkus", "quarkus"),
    ("micronaut", "micronaut"),
)
_GO_RULES: Final[SubstringRules] = (
    ("gin-gonic/gin", "gin"),
    ("echo", "echo"),
    ("fiber", "fiber"),
    ("gorilla/mux", "gorilla"),
)
_RUST_RULES: Final[SubstringRules] = (
    ("actix-web", "actix-web"),
    ("rocket", "rocket"),
    ("warp", "warp"),
    ("axum", "axum"),
)

# language -> ((manifest, (substring, framework)...), ...); manifests are read lower-cased.
MANIFEST_FRAMEWORKS: Final[dict[str, tuple[tuple[str, SubstringRules], ...]]] = {
    "python": (
        ("requirements.txt", _PYTHON_RULES),
        ("pyproject.toml", _PYTHON_RULES),
        ("Pipfile", _PYTHON_RULES),
    ),
    "java": (
        ("pom.xml", _JAVA_RULES),
        ("build.gradle", _JAVA_RULES),
    ),
    "go": (("go.mod", _GO_RULES),),
    "rust": (("Cargo.toml", _RUST_RULES),),
}

BUILD_TOOL_FILES: Final[tuple[tuple[str, str], ...]] = (
    ("package.json", "npm"),
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("pom.xml", "maven"),
    ("build.gradle", "gradle"),
    ("Cargo.toml", "cargo"),
    ("go.mod", "go"),
    ("requirements.txt", "pip"),
    ("Pipfile", "pipenv"),
    ("pyproject.toml", "poetry"),
    ("Makefile", "make"),
    ("CMakeLists.txt", "cmake"),
    ("webpack.config.js", "webpack"),
    ("rollup.config.js", "rollup"),
    ("vite.config.js", "vite"),
    ("gulpfile.js", "gulp"),
    ("Gruntfile.js", "grunt"),
)

# (glob against the repository-relative POSIX path, type, importance)
CONFIG_FILE_PATTERNS: Final[tuple[tuple[str, str, str], ...]] = (
    (".eslintrc.*", "eslint", "high"),
    ("eslint.config.js", "eslint", "high"),
    (".prettierrc*", "prettier", "medium"),
    (".stylelintrc*", "stylelint", "medium"),
    (".mega-linter.yml", "megalinter", "critical"),
    (".trunk/trunk.yaml", "trunk", "high"),
    ("tsconfig.json", "typescript", "high"),
    ("tsconfig.*.json", "typescript", "medium"),
    ("package.json", "npm", "critical"),
    ("webpack.config.*", "webpack", "medium"),
    ("vite.config.*", "vite", "medium"),
    ("jest.config.*", "jest", "medium"),
    ("vitest.config.*", "vitest", "medium"),
    ("cypress.config.*", "cypress", "low"),
    (".gitignore", "git", "high"),
    (".github/workflows/*", "github-actions", "medium"),
    (".github/dependabot.yml", "dependabot", "medium"),
    (".snyk", "snyk", "medium"),
)

__all__ = [
    "ALLOWED_HIDDEN_DIRS",
    "ALWAYS_EXCLUDE_NAMES",
    "BUILD_TOOL_FILES",
    "CONFIG_FILE_PATTERNS",
    "DATA_LANGUAGES",
    "DEFAULT_MAX_DEPTH",
    "DOCKERFILE_PREFIX",
    "EXCLUDE_NAME_GLOBS",
    "EXTENSION_LANGUAGES",
    "FILENAME_LANGUAGES",
    "JAVASCRIPT_FRAMEWORK_KEYS",
    "MANIFEST_FRAMEWORKS",
    "PRIMARY_FILE_SHARE",
    "PRIMARY_LIMIT",
    "PRIMARY_MIN_FILES",
    "SECONDARY_FILE_SHARE",
    "SECONDARY_LIMIT",
    "SECONDARY_MIN_FILES",
]
