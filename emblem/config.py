from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Set, Union

import yaml

from .compiler import CompilerOptions
from .errors import ConfigError


@dataclass
class BuildConfig:
    """What to compile and watch, read from a YAML build file."""
    write_pairs: Dict[Path, Path]  # source -> destination
    watch_paths: Set[Path] = field(default_factory=set)
    options: CompilerOptions = field(default_factory=CompilerOptions)


def parse_options(raw: Any) -> CompilerOptions:
    """Builds CompilerOptions from the `options` mapping of a build file."""
    if raw is None:
        return CompilerOptions()
    if not isinstance(raw, dict):
        raise ConfigError("'options' must be a mapping.")
    known = {f.name for f in fields(CompilerOptions)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown compiler option(s): {', '.join(unknown)}.")
    for name, value in raw.items():
        if not isinstance(value, str):
            raise ConfigError(f"Compiler option '{name}' must be a string.")
    return CompilerOptions(**raw)


def _is_path_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def parse_config(cfg: Any, base_path: Path = Path('.')) -> BuildConfig:
    """
    Validates a loaded build file.
    Source, destination and watch entries are resolved against base_path;
    watch entries are glob patterns.
    """
    if not isinstance(cfg, dict):
        raise ConfigError("Build config must be a mapping.")
    if 'write' not in cfg or not isinstance(cfg['write'], list):
        raise ConfigError("Build config needs a 'write' list of {src, dst} entries.")

    write_pairs: Dict[Path, Path] = {}
    for entry in cfg['write']:
        if not isinstance(entry, dict) or not _is_path_string(entry.get('src')) or not _is_path_string(entry.get('dst')):
            raise ConfigError(f"Invalid 'write' entry: {entry!r}. Expected 'src' and 'dst' paths.")
        write_pairs[base_path / entry['src']] = base_path / entry['dst']

    watch = cfg.get('watch') or []
    if not isinstance(watch, list) or not all(_is_path_string(p) for p in watch):
        raise ConfigError("'watch' must be a list of glob patterns.")
    try:
        watch_paths = {watch_path for watch_path_str in watch for watch_path in base_path.glob(watch_path_str)}
    except (ValueError, NotImplementedError) as e:
        raise ConfigError(f"Invalid 'watch' pattern: {e}") from e
    return BuildConfig(write_pairs, watch_paths, parse_options(cfg.get('options')))


def load_config(path: Union[str, Path]) -> BuildConfig:
    """Reads a YAML build file. Relative paths in it are relative to the file."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            cfg = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read build config '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in build config '{path}': {e}") from e
    return parse_config(cfg, path.parent)
