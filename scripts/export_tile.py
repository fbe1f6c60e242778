#!/usr/bin/env python
from __future__ import annotations

import sys
import argparse
import logging
from pathlib import Path
import numpy as np

# Add parent directory to path to allow imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from slicedoptim.rng import make_rng
from slicedoptim.types import SamplingParams, TileParams
from slicedoptim.volume import random_points_in_ball, random_points_in_cube
from slicedoptim.toroidal import wrap_unit
from slicedoptim.directions import DirectionSampler, classify_directions
from slicedoptim.diagnostics import mean_nearest_neighbor_distance, min_toroidal_distance
from slicedoptim.export import ExportError, export_sampler


def load_points(path: str) -> np.ndarray:
    if path.endswith(".npy"):
        pts = np.load(path)
    else:
        pts = np.loadtxt(path, ndmin=2)
    return np.asarray(pts, dtype=np.float64)


def initial_points(tile: TileParams, sampling: SamplingParams, rng: np.random.Generator) -> np.ndarray:
    n = tile.num_points
    if sampling.points_file is not None:
        pts = load_points(sampling.points_file)
        if pts.shape[1] != sampling.dim:
            raise ValueError(f"{sampling.points_file} holds {pts.shape[1]}-D points, expected {sampling.dim}")
        return pts
    if sampling.init == "ball":
        # ball of radius 1/2 centred in the unit cube
        return 0.5 + 0.5 * random_points_in_ball(n, sampling.dim, rng)
    return random_points_in_cube(n, sampling.dim, rng)


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--tile-size", type=int, default=16)
    ap.add_argument("--spp", type=int, default=1, help="samples per pixel")
    ap.add_argument("--frames", type=int, default=1, help="number of animation frames")
    ap.add_argument("--dim", type=int, default=2)
    ap.add_argument("--seed", type=int, default=1234)
    ap.add_argument("--init", type=str, default="cube", choices=["cube", "ball"])
    ap.add_argument("--points", type=str, default=None, help="load points from .npy or text file instead of sampling")
    ap.add_argument("--directions", type=int, default=64, help="projection directions drawn for the report")
    ap.add_argument("--output", type=str, default="tile.h")
    ap.add_argument("--plot", action="store_true", help="scatter plot the first two coordinates")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    tile = TileParams(tile_size=args.tile_size, spp=args.spp, nb_frames=args.frames)
    sampling = SamplingParams(dim=args.dim, seed=args.seed, init=args.init, points_file=args.points)

    print("=" * 70)
    print("Sliced sample tile export")
    print("=" * 70)
    print(f"  Tile size: {tile.tile_size}x{tile.tile_size}")
    print(f"  Samples per pixel: {tile.spp}")
    print(f"  Frames: {tile.nb_frames}")
    print(f"  Dimension: {sampling.dim}")
    print(f"  Random seed: {sampling.seed}")
    print(f"  Points: {sampling.points_file or sampling.init}")
    print("=" * 70)

    rng = make_rng(sampling.seed)
    pts = initial_points(tile, sampling, rng)
    wrap_unit(pts)
    print(f"✓ {pts.shape[0]:,} points ready ({tile.num_points:,} needed)")

    if pts.shape[0] <= 4096:
        dmin = min_toroidal_distance(pts)
        dmean = mean_nearest_neighbor_distance(pts)
        print(f"  Min toroidal distance: {dmin:.6f}")
        print(f"  Mean nearest-neighbour distance: {dmean:.6f}")
    else:
        print("  (distance report skipped for large point sets)")

    dirs = DirectionSampler(sampling.dim, rng=rng).sample(args.directions)
    if sampling.dim == 2:
        tags = classify_directions(dirs)
        freq = np.bincount(tags, minlength=3) / tags.size
        print(f"  Direction mix (stratified/x/y): {freq[0]:.2f}/{freq[1]:.2f}/{freq[2]:.2f}")
    proj = pts @ dirs.T
    print(f"  Projection spread: {float(np.mean(np.std(proj, axis=0))):.4f} over {dirs.shape[0]} directions")

    try:
        path = export_sampler(pts, args.output, tile.tile_size, tile.spp, tile.nb_frames)
    except (ExportError, ValueError) as e:
        print(f"⚠ Export failed: {e}")
        sys.exit(1)
    print(f"✓ Tile written to {path}")

    if args.plot:
        try:
            import matplotlib.pyplot as plt
            fig, ax = plt.subplots(figsize=(5, 5))
            ax.scatter(pts[:, 0], pts[:, 1 % sampling.dim], s=4)
            ax.set_xlim(0.0, 1.0)
            ax.set_ylim(0.0, 1.0)
            ax.set_aspect("equal")
            ax.set_title("Exported samples")
            fig.tight_layout()
            plt.show()
        except Exception as e:
            print(f"⚠ Plotting failed: {e}")

    print("=" * 70)
    print("Done")
    print("=" * 70)


if __name__ == "__main__":
    main()
