"""CLI entry point for drawing from a seeded generator."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import platform
import time

import numpy as np
from dicerng.config import DEFAULT_COUNT, DEFAULT_KIND, KINDS, PreviewConfig, RangeConfig, SampleConfig
from dicerng.errors import GeneratorError
from dicerng.generator import Generator
from dicerng.io import prepare_run_dir, staged_run, write_meta_json, write_preview_png, write_values_npy
from dicerng.sampling import (
    HISTOGRAM_MAX_SPAN,
    count_out_of_range,
    draw_doubles,
    draw_range,
    draw_u32,
    draw_u64,
    noise_raster_u8,
    range_histogram,
    summarize,
)
from dicerng.seed import derive_seed, parse_seed_text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic xorshift128+ number generator")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--seed", help="Integer seed (decimal or 0x hex) or readable text to hash")
    source.add_argument("--state", help="Explicit state as two comma-separated integers (e.g. 0,1)")
    parser.add_argument("--stream", help="Derive an independent child seed from --seed with this label")
    parser.add_argument("--kind", choices=KINDS, default=DEFAULT_KIND, help="Type of value to draw")
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help="Number of values to draw")
    parser.add_argument("--min", dest="low", type=int, default=RangeConfig.low, help="Inclusive lower bound for --kind range")
    parser.add_argument("--max", dest="high", type=int, default=RangeConfig.high, help="Inclusive upper bound for --kind range")
    parser.add_argument("--out", help="Output root directory; values are printed when omitted")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write metadata JSON files",
    )
    parser.add_argument("--preview", help="Write a WxH noise preview PNG drawn after the values (e.g. 256x128)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.stream is not None and args.seed is None:
        parser.error("--stream requires --seed")

    try:
        seed = _resolve_cli_seed(args.seed, args.state, args.stream)
        config = SampleConfig(
            kind=args.kind,
            count=args.count,
            range=RangeConfig(args.low, args.high),
            preview=_parse_preview(args.preview),
        )
        config.validate()
        gen = Generator(seed)
    except (GeneratorError, ValueError) as exc:
        parser.error(str(exc))

    initial_state = gen.current_state()

    generation_start = time.perf_counter()
    values = _draw(gen, config)
    preview = None
    if config.preview.enabled:
        preview = noise_raster_u8(gen, config.preview.width, config.preview.height)
    generation_seconds = time.perf_counter() - generation_start

    summary = summarize(values)

    if args.out is None:
        for value in values.tolist():
            print(value)
        _print_summary(config, summary, initial_state, gen.current_state(), generation_seconds)
        return 0

    out_dir = prepare_run_dir(args.out, initial_state, config, overwrite=args.overwrite)

    with staged_run(out_dir) as stage_dir:
        write_values_npy(stage_dir / "values.npy", values, config.kind)
        if preview is not None:
            write_preview_png(stage_dir / "preview.png", preview)
        if args.json:
            deterministic_meta = {
                "initial_state": [str(word) for word in initial_state],
                "final_state": [str(word) for word in gen.current_state()],
                "config": config.to_dict(),
                "summary": {
                    "count": summary.count,
                    "min": summary.minimum,
                    "max": summary.maximum,
                    "mean": summary.mean,
                    "std": summary.std,
                },
            }
            if config.kind == "range":
                deterministic_meta["histogram"] = _histogram_meta(values, config)
            meta = {
                **deterministic_meta,
                "generated_at_utc": datetime.now(timezone.utc).isoformat(),
                "generation_seconds": generation_seconds,
                "python_version": platform.python_version(),
                "numpy_version": np.__version__,
            }
            write_meta_json(stage_dir / "deterministic_meta.json", deterministic_meta)
            write_meta_json(stage_dir / "meta.json", meta)

    print(f"Wrote samples: {out_dir}")
    _print_summary(config, summary, initial_state, gen.current_state(), generation_seconds)
    file_count = sum(1 for child in out_dir.iterdir() if child.is_file())
    print(f"Output files: {file_count}")
    return 0


def _resolve_cli_seed(seed_text: str | None, state_text: str | None, stream: str | None) -> int | tuple[int, int] | None:
    if state_text is not None:
        parts = [part.strip() for part in state_text.split(",")]
        try:
            return tuple(int(part, 0) for part in parts)
        except ValueError as exc:
            raise ValueError(f"State words must be integers, received '{state_text}'.") from exc
    if seed_text is None:
        return None
    seed = parse_seed_text(seed_text)
    if stream is not None:
        seed = derive_seed(seed, stream)
    return seed


def _parse_preview(value: str | None) -> PreviewConfig:
    if not value:
        return PreviewConfig()
    width_text, sep, height_text = value.lower().partition("x")
    if not sep:
        raise ValueError(f"Preview size must look like WxH, received '{value}'.")
    try:
        width, height = int(width_text), int(height_text)
    except ValueError as exc:
        raise ValueError(f"Preview size must look like WxH, received '{value}'.") from exc
    if width <= 0 or height <= 0:
        raise ValueError("Preview width and height must be positive.")
    return PreviewConfig(width, height)


def _histogram_meta(values: np.ndarray, config: SampleConfig) -> dict:
    low, high = config.range.low, config.range.high
    if high - low + 1 > HISTOGRAM_MAX_SPAN:
        return {"out_of_range": count_out_of_range(values, low, high)}
    histogram = range_histogram(values, low, high)
    return {
        "counts": histogram.counts.tolist(),
        "values_covered": histogram.values_covered,
        "out_of_range": histogram.out_of_range,
        "chi_square": histogram.chi_square,
    }


def _draw(gen: Generator, config: SampleConfig) -> np.ndarray:
    if config.kind == "u64":
        return draw_u64(gen, config.count)
    if config.kind == "u32":
        return draw_u32(gen, config.count)
    if config.kind == "range":
        return draw_range(gen, config.range.low, config.range.high, config.count)
    return draw_doubles(gen, config.count)


def _print_summary(config, summary, initial_state, final_state, generation_seconds: float) -> None:
    print(f"Initial state: {initial_state[0]:#018x} {initial_state[1]:#018x}")
    print(f"Final state: {final_state[0]:#018x} {final_state[1]:#018x}")
    if summary.count:
        print(
            f"Drew {summary.count} {config.kind} values: "
            f"min={summary.minimum:g}, max={summary.maximum:g}, mean={summary.mean:g}"
        )
    print(f"Generation time: {generation_seconds:.3f} s")


if __name__ == "__main__":
    raise SystemExit(main())
