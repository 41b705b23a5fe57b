"""
Example: "sound propagation" poster.

Usage:
    python examples/sound_propagation.py [--seed N] [--sources 2] [--obstacles 5]

Builds a random scene (a slit wall plus a few circles, capsules and
rectangles, some of them soft), computes every source's wavefronts, smooths
them with a spline and draws them with an opacity modulated by ring number
and by interference with the other sources. Saves a PNG under
examples/outputs/.
"""

import sys
import os
import argparse
import logging
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib import colors
from scipy.interpolate import splprep, splev

# Ensure the project root is on sys.path when running this script directly
root_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root_path not in sys.path:
    sys.path.insert(0, root_path)

from wavefront import (Bounds, Capsule, Circle, PropagationConfig, Rect, Source,
                       decimate, trace_wavefronts)
from wavefront.logging_config import setup_logging

OUT_DIR = Path(__file__).resolve().parent / "outputs"

logger = logging.getLogger("wavefront.examples")


def generate_scene(seed, bounds, wavelength=25.0, source_count=2, obstacle_count=5):
    """Random sources and obstacles: a wall with a gap plus assorted shapes."""
    rng = np.random.default_rng(seed)
    bx, by, bw, bh = bounds.x, bounds.y, bounds.width, bounds.height

    # primary source in the upper part
    sources = [Source(position=(bx + bw * rng.uniform(0.3, 0.7), by + bh * rng.uniform(0.15, 0.35)),
                      wavelength=wavelength)]
    for _ in range(source_count - 1):
        sources.append(Source(position=(bx + bw * rng.uniform(0.1, 0.9), by + bh * rng.uniform(0.1, 0.9)),
                              wavelength=wavelength * rng.uniform(0.9, 1.1),
                              amplitude=rng.uniform(0.4, 0.8)))

    # slit: two wall pieces either side of a gap
    gap_y = by + bh * rng.uniform(0.5, 0.6)
    gap_x = bx + bw * rng.uniform(0.4, 0.6)
    gap = rng.uniform(30.0, 60.0)
    wall = 15.0
    left = bx - 50.0
    obstacles = [
        Rect(left, gap_y - wall / 2, gap_x - gap / 2 - left, wall),
        Rect(gap_x + gap / 2, gap_y - wall / 2, bx + bw + 50.0 - (gap_x + gap / 2), wall),
    ]

    for _ in range(obstacle_count - 2):
        kind = rng.integers(3)
        pos = (bx + bw * rng.uniform(0.1, 0.9), by + bh * rng.uniform(0.1, 0.9))
        # keep clear of the sources
        if any(np.hypot(pos[0] - s.position[0], pos[1] - s.position[1]) < 80.0 for s in sources):
            continue
        if kind == 0:
            obs = Circle(pos, rng.uniform(20.0, 50.0))
        elif kind == 1:
            end = (pos[0] + rng.uniform(-60.0, 60.0), pos[1] + rng.uniform(-60.0, 60.0))
            obs = Capsule(pos, end, rng.uniform(10.0, 25.0))
        else:
            w, h = rng.uniform(40.0, 80.0), rng.uniform(40.0, 80.0)
            obs = Rect(pos[0] - w / 2, pos[1] - h / 2, w, h)
        if rng.random() < 0.2:
            obs.speed = rng.uniform(0.3, 0.6)  # soft obstacle
        obstacles.append(obs)

    return sources, obstacles


def smooth(polyline, samples=200):
    """Spline through the polyline points (periodic when closed)."""
    pts = decimate(polyline).as_array()
    if polyline.is_closed:
        pts = pts[:-1]
    if len(pts) < 4:
        return pts
    tck, _ = splprep([pts[:, 0], pts[:, 1]], s=0, per=polyline.is_closed)
    x, y = splev(np.linspace(0.0, 1.0, samples), tck)
    return np.column_stack([x, y])


def opacity(step, steps, interference, amplitude):
    """Fade with ring number, dim where interference is destructive."""
    time_alpha = np.interp(step, [0, steps], [0.9, 0.05])
    i_mod = np.interp(interference, [-1.0, 1.0], [0.3, 1.0])
    return float(np.clip(time_alpha * i_mod * amplitude, 0.0, 1.0))


def render(seed, cfg, source_count, obstacle_count, palette='mono', size=(600, 800)):
    width, height = size
    margin = min(width, height) * 0.08
    bounds = Bounds(margin, margin, width - 2 * margin, height - 2 * margin)
    sources, obstacles = generate_scene(seed, bounds, cfg.wavelength, source_count, obstacle_count)
    wavefronts, _ = trace_wavefronts(sources, obstacles, bounds, cfg)

    dark = seed % 2 == 0
    bg = '#121212' if dark else '#fdfdfd'
    line = np.array([1.0, 1.0, 1.0]) if dark else np.array([0.0, 0.0, 0.0])

    fig = plt.figure(figsize=(width / 100, height / 100), dpi=100)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_facecolor(bg)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.axis('off')

    for wf in wavefronts:
        src = sources[wf.source_index]
        alpha = opacity(wf.step, cfg.steps, wf.interference, src.amplitude)
        if palette == 'mono':
            rgb = line
        else:
            hue = (wf.step / 25.0 + wf.source_index * 0.3) % 1.0
            rgb = colors.hsv_to_rgb([hue, 0.5, 0.8 if dark else 0.5])
        curve = smooth(wf.polyline)
        ax.plot(curve[:, 0], curve[:, 1], color=(*rgb, alpha), linewidth=0.8)

    caption = (f'SOUND PROPAGATION | SEED: {seed} | SOURCES: {len(sources)} | OBSTACLES: {len(obstacles)}'
               f' | WAVELENGTH: {cfg.wavelength:.1f} | STEPS: {cfg.steps}')
    ax.text(margin, height - margin * 0.6, caption, color=(*line, 0.7), fontsize=6)
    return fig, len(wavefronts)


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--sources', type=int, default=2)
    parser.add_argument('--obstacles', type=int, default=5)
    parser.add_argument('--wavelength', type=float, default=25.0)
    parser.add_argument('--steps', type=int, default=120)
    parser.add_argument('--resolution', type=int, default=250)
    parser.add_argument('--palette', choices=['mono', 'hue'], default='mono')
    parser.add_argument('--debug', action='store_true')
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.debug else logging.INFO)
    seed = args.seed if args.seed is not None else int(np.random.default_rng().integers(2**31))
    cfg = PropagationConfig(wavelength=args.wavelength, steps=args.steps, grid_resolution=args.resolution)

    fig, count = render(seed, cfg, args.sources, args.obstacles, palette=args.palette)
    OUT_DIR.mkdir(exist_ok=True)
    out = OUT_DIR / f'sound_propagation_s{seed}_w{int(cfg.wavelength)}.png'
    fig.savefig(out, facecolor=fig.axes[0].get_facecolor())
    logger.info('Saved %d wavefronts to %s', count, out)


if __name__ == '__main__':
    main()
