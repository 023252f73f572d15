"""Output layout and serialization for sampling runs.

A run is written to ``<out>/<initial state hex>/<kind>-<count>``. Files are
staged in a sibling directory and published together, so a failed run never
leaves a half-written directory behind.
"""

from __future__ import annotations

from contextlib import contextmanager
import json
from pathlib import Path
import shutil
import tempfile
from typing import Any, Iterator

import numpy as np
from PIL import Image

from dicerng.config import SampleConfig
from dicerng.errors import InvalidArgumentError

KIND_DTYPES: dict[str, type[np.generic]] = {
    "u64": np.uint64,
    "u32": np.uint32,
    "double": np.float64,
    "range": np.int64,
}


def state_label(state: tuple[int, int]) -> str:
    """Render a state pair as 32 hex digits, word 0 first."""

    return f"{state[0]:016x}{state[1]:016x}"


def run_dir(out_root: str | Path, initial_state: tuple[int, int], config: SampleConfig) -> Path:
    return Path(out_root) / state_label(initial_state) / f"{config.kind}-{config.count}"


def prepare_run_dir(
    out_root: str | Path,
    initial_state: tuple[int, int],
    config: SampleConfig,
    *,
    overwrite: bool,
) -> Path:
    """Create the directory for one run, refusing to reuse a populated one unless asked."""

    target = run_dir(out_root, initial_state, config)
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


@contextmanager
def staged_run(target: Path) -> Iterator[Path]:
    """Yield a staging directory whose files replace target's contents on clean exit."""

    stage_dir = Path(tempfile.mkdtemp(prefix=".staging-", dir=str(target.parent)))
    try:
        yield stage_dir
        staged = {child.name for child in stage_dir.iterdir()}
        for child in target.iterdir():
            if child.name in staged:
                continue
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
        for child in stage_dir.iterdir():
            child.replace(target / child.name)
    finally:
        shutil.rmtree(stage_dir, ignore_errors=True)


def write_values_npy(path: str | Path, values: np.ndarray, kind: str) -> None:
    """Save draws of one kind; the array dtype must match the kind exactly."""

    expected = KIND_DTYPES.get(kind)
    if expected is None:
        raise InvalidArgumentError(f"Unknown kind {kind!r}")
    if values.dtype != np.dtype(expected):
        raise InvalidArgumentError(f"{kind} values must have dtype {np.dtype(expected)}, got {values.dtype}")
    np.save(Path(path), values, allow_pickle=False)


def write_preview_png(path: str | Path, raster: np.ndarray) -> None:
    if raster.ndim != 2 or raster.dtype != np.uint8:
        raise InvalidArgumentError("preview raster must be a 2D uint8 array")
    Image.fromarray(raster).save(Path(path))


def write_meta_json(path: str | Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True, default=_json_default)
    Path(path).write_text(text + "\n", encoding="utf-8")


def _json_default(value: Any) -> Any:
    # State words and uint64 draws exceed the range JSON readers handle exactly.
    if isinstance(value, np.unsignedinteger) and value.dtype == np.uint64:
        return str(int(value))
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    if isinstance(value, np.ndarray):
        return value.tolist()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
