from __future__ import annotations

import argparse

from novadefense.core.config import load_config
from novadefense.gui.pyglet_app import run


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--width", type=int, default=960)
    ap.add_argument("--height", type=int, default=640)
    ap.add_argument("--lang", choices=("en", "zh"), default="en")
    ap.add_argument("--config", default=None, help="JSON game config")
    ap.add_argument("--set", action="append", default=None, dest="overrides", help="section.key=value")
    args = ap.parse_args()
    run(
        width=args.width,
        height=args.height,
        lang=args.lang,
        config=load_config(args.config, args.overrides),
    )


if __name__ == "__main__":
    main()
