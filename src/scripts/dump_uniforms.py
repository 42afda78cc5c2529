#!/usr/bin/env python3
"""
Uniform block dumper.

Builds the scene from the project config and prints one packed uniform block,
either as hex (16 bytes per line, offset-prefixed) or as float32 values.

Usage:
  python -m scripts.dump_uniforms --layout scene-wvp --aspect 1.7778 --angle-deg 30
  WVP_CONFIG=my_scene.yaml python -m scripts.dump_uniforms --format floats
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import numpy as np

from api import Mat4x4, Scene
from common.logging import setup_default_logging
from util.angles import deg2rad

_logger = logging.getLogger(__name__)

LAYOUT_CHOICES = ("scene-wvp", "scene-vp", "model", "wvp")


def build_block(scene: Scene, layout: str, angle_deg: float) -> bytes:
    world = Mat4x4.rotation_y(deg2rad(angle_deg))
    if layout == "scene-wvp":
        return scene.pack_scene_wvp(world)
    if layout == "scene-vp":
        return scene.pack_scene_vp()
    if layout == "model":
        return scene.pack_model(world)
    if layout == "wvp":
        return scene.pack_wvp(world)
    raise ValueError(f"unknown layout: {layout}; allowed={', '.join(LAYOUT_CHOICES)}")


def format_block(data: bytes, fmt: str) -> str:
    lines: list[str] = []
    for off in range(0, len(data), 16):
        chunk = data[off : off + 16]
        if fmt == "hex":
            body = chunk.hex(" ")
        else:
            body = " ".join(f"{v: .6f}" for v in np.frombuffer(chunk, dtype=np.float32))
        lines.append(f"{off:04d}: {body}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Dump a packed uniform block.")
    ap.add_argument("--layout", choices=LAYOUT_CHOICES, default="scene-wvp")
    ap.add_argument("--aspect", type=float, default=1.0)
    ap.add_argument("--angle-deg", type=float, default=0.0, help="world rotation around Y")
    ap.add_argument("--format", choices=("hex", "floats"), default="hex")
    ap.add_argument("--log-level", default=None)
    args = ap.parse_args(argv)

    setup_default_logging(args.log_level)
    scene = Scene.load(aspect=args.aspect)
    data = build_block(scene, args.layout, args.angle_deg)
    _logger.info("layout=%s bytes=%d", args.layout, len(data))
    sys.stdout.write(format_block(data, args.format) + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
