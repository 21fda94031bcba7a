"""Grow a bonsai from a seed and save it as SVG, PNG or PPM."""

from __future__ import annotations

import argparse
import json
import os
import random
import sys
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from .digits import describe, extract_digits, format_seed, shuffle_seed
from .errors import InvalidInput
from .grid import Grid
from .raster import IMAGE_FORMATS, blit_pixels, next_output_path, render_rgb, save_image
from .runlog import StatsLogger, append_change_log, append_run_log
from .simulation import Simulation, SimulationState, initialize
from .store import TreeStore

DEFAULT_SEED = "2.12345678"


def load_config(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def build_parser(config: dict, config_path: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed-driven bonsai growth")
    parser.add_argument("--config", type=str, default=config_path, help="Config file")
    parser.add_argument(
        "--seed",
        type=str,
        default=config.get("seed"),
        help="Wallet-style value whose 8 decimal digits steer growth",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=config.get("steps", 0),
        help="Growth steps to run (0 grows until the tree is finished)",
    )
    parser.add_argument(
        "--auto",
        action="store_true",
        default=config.get("auto", False),
        help="Shuffle the seed before every step",
    )
    parser.add_argument(
        "--shuffle-seed",
        type=int,
        default=config.get("shuffle_seed", 1),
        help="Random seed for --auto seed shuffling",
    )
    parser.add_argument("--width", type=int, default=config.get("width", 32))
    parser.add_argument("--height", type=int, default=config.get("height", 32))
    parser.add_argument(
        "--output-dir",
        type=str,
        default=config.get("output_dir", "output"),
        help="Directory for output images",
    )
    parser.add_argument(
        "--output-prefix",
        type=str,
        default=config.get("output_prefix", "bonsai"),
        help="Output filename prefix",
    )
    parser.add_argument(
        "--output-format",
        type=str,
        default=config.get("output_format", "svg"),
        choices=list(IMAGE_FORMATS),
        help="Output image format",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=config.get("scale", 8),
        help="Pixel scale for PNG output and the pygame window",
    )
    parser.add_argument(
        "--render-every",
        type=int,
        default=config.get("render_every", 0),
        help="Save a frame and print stats every N steps (0 saves only final)",
    )
    parser.add_argument(
        "--pygame",
        action="store_true",
        default=config.get("pygame", False),
        help="Display growth live with pygame",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=config.get("fps", 10),
        help="Frame rate for pygame display",
    )
    parser.add_argument(
        "--steps-per-frame",
        type=int,
        default=config.get("steps_per_frame", 1),
        help="Growth steps per pygame frame",
    )
    parser.add_argument(
        "--store",
        type=str,
        default=config.get("store"),
        help="Directory of saved trees (used with --token)",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=config.get("token"),
        help="Token id to resume and save under --store",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        default=config.get("explain", False),
        help="Print what each seed digit controls",
    )
    parser.add_argument(
        "--stats-csv",
        type=str,
        default=config.get("stats_csv"),
        help="Write per-step stats to this CSV file",
    )
    parser.add_argument(
        "--run-note",
        type=str,
        default=config.get("run_note", ""),
        help="Optional note to store with the run log",
    )
    return parser


def seed_source(args: argparse.Namespace) -> Optional[Iterator[float]]:
    if not args.auto:
        return None
    rand = random.Random(args.shuffle_seed)

    def shuffled() -> Iterator[float]:
        while True:
            yield shuffle_seed(rand)

    return shuffled()


def print_explain(seed: str) -> None:
    print(f"Seed {seed}")
    for index, (name, value, label) in enumerate(describe(extract_digits(seed)), start=1):
        print(f"  Digit {index}: {name:<12} {value:<10} {label}")


def print_stats(sim: Simulation) -> None:
    result = sim.score()
    state = sim.state
    print(
        f"Step {state.step} | seed={state.seed} tips={len(state.tips)} "
        f"age={result.age} branches={result.branches} foliage={result.foliage} "
        f"score={result.total}/{result.max_score}"
    )


def main(argv: Optional[List[str]] = None) -> int:
    config_parser = argparse.ArgumentParser(add_help=False)
    config_parser.add_argument(
        "--config",
        type=str,
        default="bonsai_config.json",
        help="Path to JSON config file",
    )
    config_args, remaining = config_parser.parse_known_args(argv)
    config = load_config(config_args.config)
    args = build_parser(config, config_args.config).parse_args(remaining)

    grid = Grid(width=max(8, args.width), height=max(8, args.height))
    store = TreeStore(args.store) if args.store and args.token else None

    try:
        state: Optional[SimulationState] = store.load(args.token) if store else None
        if state is None:
            state = initialize(args.seed or DEFAULT_SEED, grid)
        elif args.seed:
            state.seed = format_seed(args.seed)
    except InvalidInput as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 2

    sim = Simulation.from_state(state)
    grid = sim.state.grid
    if args.explain:
        print_explain(sim.state.seed)

    os.makedirs(args.output_dir, exist_ok=True)
    output_path, run_index = next_output_path(
        args.output_dir, args.output_prefix, args.output_format
    )
    saved_images: List[str] = []
    frame_index = run_index

    stats = StatsLogger(args.stats_csv) if args.stats_csv else None
    if stats is not None:
        stats.open()

    def after_step() -> None:
        nonlocal frame_index
        state = sim.state
        if stats is not None:
            result = sim.score()
            stats.log(
                state.step,
                state.seed,
                len(state.tips),
                len(state.pixels),
                result.branches,
                result.foliage,
                result.total,
                event="finished" if sim.finished else "",
            )
        if args.render_every > 0 and state.step % args.render_every == 0:
            print_stats(sim)
            frame_path = os.path.join(
                args.output_dir,
                f"{args.output_prefix}_{frame_index:04d}_step{state.step:03d}.{args.output_format}",
            )
            save_image(frame_path, state.pixels, state.seed, args.output_format, grid, args.scale)
            saved_images.append(frame_path)

    growth = sim.auto_grow(seed_source(args), max_steps=args.steps)

    try:
        if args.pygame:
            try:
                import pygame  # type: ignore
            except ImportError as exc:  # pragma: no cover - needs a display
                print("pygame is required for --pygame mode. Install it and try again.", file=sys.stderr)
                print(f"Import error: {exc}", file=sys.stderr)
                return 1

            pygame.init()
            window = (grid.width * args.scale, grid.height * args.scale)
            screen = pygame.display.set_mode(window)
            pygame.display.set_caption("Bonsai Growth")
            clock = pygame.time.Clock()

            running = True
            growing = True
            while running and growing:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False

                for _ in range(max(1, args.steps_per_frame)):
                    if not growing:
                        break
                    if next(growth, None) is None:
                        growing = False
                        break
                    after_step()

                state = sim.state
                surface = pygame.Surface((grid.width, grid.height))
                blit_pixels(surface, render_rgb(state.pixels, state.seed, grid), grid)
                scaled = pygame.transform.scale(surface, window)
                screen.blit(scaled, (0, 0))
                result = sim.score()
                pygame.display.set_caption(
                    f"Bonsai Growth | step {state.step} | score {result.total}/100"
                )
                pygame.display.flip()
                clock.tick(args.fps)

            pygame.quit()
        else:
            for _ in growth:
                after_step()
    finally:
        if stats is not None:
            stats.close()

    state = sim.state
    save_image(output_path, state.pixels, state.seed, args.output_format, grid, args.scale)
    print_stats(sim)
    if sim.finished:
        print("Tree reached its final shape.")
    print(f"Saved: {output_path}")
    saved_images.append(output_path)

    if store is not None:
        store_path = store.save(args.token, state)
        print(f"Stored: {store_path}")

    result = sim.score()
    run_config = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "output_path": output_path,
        "run_index": run_index,
        "image_paths": saved_images,
        "args": vars(args),
        "seed": state.seed,
        "steps": state.step,
        "finished": sim.finished,
        "score": result.total,
        "last_instructions": args.run_note,
    }
    log_path = os.path.join(args.output_dir, "image_generation_log.json")
    last_config = append_run_log(log_path, run_config)
    change_log_path = os.path.join(args.output_dir, "image_generation_changes.jsonl")
    append_change_log(change_log_path, last_config, run_config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
