import logging
import shutil
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from jsx_tagger.core.identity import relative_path
from jsx_tagger.models import TransformResult
from jsx_tagger.plugin import JsxTagger

logger = logging.getLogger(__name__)


def iter_source_files(src_root: Path, include: Callable[[str], bool], exclude: Path | None = None) -> list[Path]:
    """Return included files under ``src_root`` in a stable order, skipping anything below ``exclude``."""
    exclude = exclude.resolve() if exclude is not None else None
    files = []
    for path in src_root.rglob("*"):
        if not path.is_file() or not include(str(path)):
            continue
        if exclude is not None and exclude in path.resolve().parents:
            continue
        files.append(path)
    return sorted(files)


def target_path(source_path: Path, src_root: Path, out_root: Path) -> Path:
    return out_root / source_path.relative_to(src_root)


def write_source_map(result: TransformResult, source_path: Path, target: Path) -> str:
    """Write ``<target>.map`` and return the tagged code ending in its ``sourceMappingURL`` comment.

    The map's ``sources`` entry is rewritten relative to the map file.
    """
    map_path = target.with_name(target.name + ".map")
    sources = [relative_path(str(source_path.resolve()), map_path.parent.resolve())]
    map_path.write_text(result.map.model_copy(update={"sources": sources}).to_json(), encoding="utf-8")
    return result.code + f"\n//# sourceMappingURL={map_path.name}\n"


def tag_file(tagger: JsxTagger, source_path: Path, src_root: Path, out_root: Path, write_map: bool = False) -> Path:
    """Write the tagged (or untouched) copy of ``source_path`` into ``out_root``."""
    target = target_path(source_path, src_root, out_root)
    target.parent.mkdir(parents=True, exist_ok=True)

    try:
        text = source_path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        logger.warning("Skipping %s: not valid UTF-8, copied unchanged", source_path)
        tagger.stats.record_failed()
        shutil.copyfile(source_path, target)
        return target

    result = tagger.transform(text, str(source_path))
    if result is None:
        target.write_text(text, encoding="utf-8")
        return target

    code = write_source_map(result, source_path, target) if write_map else result.code
    target.write_text(code, encoding="utf-8")
    return target


def build_tree(
    tagger: JsxTagger,
    src_root: Path,
    out_root: Path,
    workers: int = 1,
    write_map: bool = False,
) -> list[Path]:
    files = iter_source_files(src_root, tagger.includes, exclude=out_root)
    return tag_files(tagger, files, src_root, out_root, workers=workers, write_map=write_map)


def tag_files(
    tagger: JsxTagger,
    files: Iterable[Path],
    src_root: Path,
    out_root: Path,
    workers: int = 1,
    write_map: bool = False,
) -> list[Path]:
    files = list(files)
    if workers <= 1:
        return [tag_file(tagger, path, src_root, out_root, write_map) for path in files]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda path: tag_file(tagger, path, src_root, out_root, write_map), files))
