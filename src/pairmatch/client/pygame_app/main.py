from __future__ import annotations

import argparse
import logging

import pygame  # type: ignore[import-not-found]

from pairmatch.paths import get_paths
from pairmatch.services.content import ContentService
from pairmatch.services.telemetry import TelemetryService

from .app import App, GameContext
from .scenes.boot import BootScene
from .ui import load_fonts


def main() -> int:
    parser = argparse.ArgumentParser(prog="pairmatch")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--difficulty", choices=["easy", "medium", "hard"], default="easy")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Memory Match")

    clock = pygame.time.Clock()
    paths = get_paths()

    content = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir)
    telemetry = TelemetryService(paths.userdata_dir / "telemetry.jsonl")

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        fonts=load_fonts(),
        content=content,
        telemetry=telemetry,
    )

    app = App(ctx, BootScene(ctx, difficulty=args.difficulty))
    code = app.run()
    pygame.quit()
    return code


if __name__ == "__main__":
    raise SystemExit(main())
