from pathlib import Path

_LANGUAGE_ALIASES = {
    "javascript": "javascript",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "typescript": "typescript",
    "tsx": "tsx",
}

_EXTENSION_LANGUAGE_MAP = {
    ".cjs": "javascript",
    ".cts": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".mts": "typescript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

# Extensions instrumented by default; plain .js/.ts files are left alone.
MARKUP_EXTENSIONS: frozenset[str] = frozenset({".jsx", ".tsx"})

# Grammar used when the extension says nothing: tsx parses markup and type syntax.
FALLBACK_LANGUAGE = "tsx"

_SUPPORTED_LANGUAGES = set(_LANGUAGE_ALIASES.values())


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(normalized, normalized)
    if resolved not in _SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language '{language}'. Supported: {sorted(_SUPPORTED_LANGUAGES)}")
    return resolved


def detect_language_from_path(file_path: Path) -> str:
    return _EXTENSION_LANGUAGE_MAP.get(file_path.suffix.lower(), FALLBACK_LANGUAGE)


def resolve_language(language: str | None, file_path: Path | None) -> str:
    if language:
        return normalize_language(language)
    if file_path:
        return detect_language_from_path(file_path)
    return FALLBACK_LANGUAGE


def is_markup_file(file_id: str) -> bool:
    """Default include filter: ``.jsx`` and ``.tsx`` files, ignoring query strings."""
    return Path(file_id.split("?", 1)[0]).suffix.lower() in MARKUP_EXTENSIONS
