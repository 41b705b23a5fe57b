"""
Example: animate wavefronts spreading from two sources around a slit wall.

Usage:
    python examples/ring_animation.py

Each frame adds the next ring of every source, so the GIF shows the
arrival-time field being swept out. Saves examples/outputs/rings.gif.
"""

import sys
import os
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import imageio

# Ensure the project root is on sys.path when running this script directly
root_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root_path not in sys.path:
    sys.path.insert(0, root_path)

from wavefront import Bounds, Circle, PropagationConfig, Rect, Source, trace_wavefronts

OUT_DIR = Path(__file__).resolve().parent / "outputs"
OUT_DIR.mkdir(exist_ok=True)


def main():
    bounds = Bounds(0.0, 0.0, 300.0, 400.0)
    sources = [
        Source(position=(150.0, 80.0), wavelength=20.0),
        Source(position=(60.0, 320.0), wavelength=22.0, amplitude=0.6),
    ]
    obstacles = [
        Rect(-50.0, 200.0, 180.0, 12.0),
        Rect(170.0, 200.0, 200.0, 12.0),
        Circle((230.0, 300.0), 30.0, speed=0.4),
    ]
    cfg = PropagationConfig(wavelength=20.0, steps=40, grid_resolution=150)

    wavefronts, fields = trace_wavefronts(sources, obstacles, bounds, cfg)
    print(f'{len(wavefronts)} wavefronts')

    fig, ax = plt.subplots(figsize=(3, 4), dpi=100)
    ax.imshow(np.where(np.isfinite(fields[0].values), fields[0].values, np.nan),
              extent=(bounds.x, bounds.x1, bounds.y1, bounds.y), cmap='Greys', alpha=0.3)
    ax.set_xlim(bounds.x, bounds.x1)
    ax.set_ylim(bounds.y1, bounds.y)
    ax.axis('off')
    colors = ['tab:blue', 'tab:orange']

    frames = []
    for step in range(1, cfg.steps + 1):
        for wf in wavefronts:
            if wf.step != step:
                continue
            pts = wf.polyline.as_array()
            alpha = float(np.interp(wf.interference, [-1.0, 1.0], [0.2, 1.0]))
            ax.plot(pts[:, 0], pts[:, 1], color=colors[wf.source_index], alpha=alpha, linewidth=0.6)
        fig.canvas.draw()
        frames.append(np.asarray(fig.canvas.buffer_rgba())[:, :, :3].copy())

    gif_path = OUT_DIR / 'rings.gif'
    imageio.mimsave(gif_path, frames, fps=10)
    print('Saved animation to:', gif_path)


if __name__ == '__main__':
    # the field computation uses worker processes
    main()
