from __future__ import annotations

import argparse
from pathlib import Path

import pygame  # type: ignore[import-not-found]

from triadtcg.paths import get_paths
from triadtcg.services.content import ContentService
from triadtcg.services.telemetry import TelemetryService

from .app import App, GameContext
from .scene_base import WINDOW_TITLE
from .scenes.boot import BootScene
from .ui import load_fonts


def main() -> int:
    parser = argparse.ArgumentParser(prog="triadtcg")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--seed", type=int, default=None, help="fix the battle RNG seed")
    parser.add_argument("--userdata", type=Path, default=None, help="directory for telemetry output")
    args = parser.parse_args()

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption(WINDOW_TITLE)

    clock = pygame.time.Clock()
    paths = get_paths(args.userdata)

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        fonts=load_fonts(),
        content=ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        telemetry=TelemetryService(paths.telemetry_file),
        seed=args.seed,
    )

    app = App(ctx, BootScene(ctx))
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
