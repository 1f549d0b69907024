import os
from collections.abc import Mapping
from pathlib import Path

from jsx_tagger.models import DEFAULT_PREFIX, TransformConfig
from jsx_tagger.plugin import TaggerOptions

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


def _optional_bool(env: Mapping[str, str], name: str) -> bool | None:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    return parse_bool(name, raw)


def load_options(env: Mapping[str, str] | None = None) -> TaggerOptions:
    """Build tagger options from ``JSX_TAGGER_*`` environment variables."""
    env = os.environ if env is None else env
    props = _optional_bool(env, "JSX_TAGGER_PROPS")
    preview = _optional_bool(env, "JSX_TAGGER_CONTENT_PREVIEW")
    base_dir = env.get("JSX_TAGGER_BASE_DIR")

    config = TransformConfig(
        attribute_prefix=env.get("JSX_TAGGER_PREFIX") or DEFAULT_PREFIX,
        include_static_snapshot=True if props is None else props,
        include_content_preview=False if preview is None else preview,
        base_directory=Path(base_dir) if base_dir else Path.cwd(),
    )
    return TaggerOptions(enabled=_optional_bool(env, "JSX_TAGGER_ENABLED"), config=config)
