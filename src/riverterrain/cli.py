"""Command-line interface for terrain sampling."""

import argparse
import logging
import sys
import time
from pathlib import Path

import structlog


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog console output."""
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sample a procedural river terrain height field"
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="TOML config file (optional)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Override terrain seed")
    parser.add_argument("--width", type=int, default=None, help="Grid columns")
    parser.add_argument("--height", type=int, default=None, help="Grid rows")
    parser.add_argument(
        "--spacing", type=float, default=None, help="World units between samples"
    )
    parser.add_argument(
        "--origin",
        type=float,
        nargs=2,
        metavar=("X", "Z"),
        default=None,
        help="World position of the first sample",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="terrain_sample.npz",
        help="Output path (default: terrain_sample.npz)",
    )
    parser.add_argument(
        "--mask-image",
        type=str,
        default=None,
        help="Also save the river mask as a PNG (optional)",
    )
    parser.add_argument(
        "--workers", type=int, default=1, help="Worker threads (default: 1)"
    )
    parser.add_argument(
        "--validate", action="store_true", help="Validate the sampled rasters"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for terrain sampling."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from .config import TerrainConfig, load_config
    from .persistence import save_mask_image, save_sample
    from .sampling import sample_terrain
    from .validation import validate_sample

    config = load_config(Path(args.config)) if args.config else TerrainConfig()
    if args.seed is not None:
        config = config.with_seed(args.seed)

    grid_updates = {
        key: value
        for key, value in (
            ("width", args.width),
            ("height", args.height),
            ("spacing", args.spacing),
        )
        if value is not None
    }
    if args.origin is not None:
        grid_updates["origin_x"], grid_updates["origin_z"] = args.origin
    if grid_updates:
        config = config.model_copy(
            update={"grid": config.grid.model_copy(update=grid_updates)}
        )

    logger.info(
        "terrain_sampling_started",
        config=args.config or "defaults",
        seed=config.terrain.seed,
        output=args.output,
    )

    start_time = time.time()
    result = sample_terrain(config, workers=args.workers)
    logger.info("terrain_sampling_complete", seconds=round(time.time() - start_time, 2))

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_sample(output_path, result)

    if args.mask_image:
        save_mask_image(Path(args.mask_image), result.mask)

    if args.validate and not validate_sample(result).passed:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
