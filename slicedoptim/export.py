from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)


class ExportError(OSError):
    """Raised when the tile header cannot be written."""


@dataclass
class Tile:
    """Tiled sample set laid out as [frame][row][column * spp * dim].

    All indices passed to :meth:`sample` wrap around their extent, so the
    tile repeats infinitely in every direction and over time.
    """

    data: np.ndarray  # (nb_frames, tile_size, tile_size * spp * dim)
    spp: int
    dim: int

    @property
    def nb_frames(self) -> int:
        return int(self.data.shape[0])

    @property
    def tile_size(self) -> int:
        return int(self.data.shape[1])

    def sample(self, f: int, i: int, j: int, s: int, d: int) -> float:
        return tile_sample(self.data, f, i, j, s, d, self.spp, self.dim)


def tile_sample(data: np.ndarray, f: int, i: int, j: int, s: int, d: int, spp: int, dim: int) -> float:
    nb_frames, tile_size, width = data.shape
    if width != tile_size * spp * dim:
        raise ValueError(f"row width {width} does not match tile_size*spp*dim={tile_size * spp * dim}")
    return float(data[f % nb_frames, i % tile_size, (j % tile_size) * spp * dim + (s % spp) * dim + (d % dim)])


def build_tile(points: np.ndarray, tile_size: int, spp: int, nb_frames: int = 1) -> Tile:
    """Arrange points into a tile.

    Sample k of pixel (i, j) in frame f is point ((f * tile_size + i) *
    tile_size + j) * spp + k when at least nb_frames * tile_size**2 * spp
    points are given. With fewer, but at least one tile's worth, every frame
    repeats the first tile_size**2 * spp points. Extra points are ignored.
    Non-finite coordinates have no C literal and raise ValueError.
    """

    p = np.asarray(points, dtype=np.float64)
    if p.ndim != 2:
        raise ValueError(f"expected an (n, dim) array, got shape {p.shape}")
    if tile_size <= 0 or spp <= 0 or nb_frames <= 0:
        raise ValueError(f"tile_size, spp and nb_frames must be positive, got {tile_size}, {spp}, {nb_frames}")
    if not np.isfinite(p).all():
        raise ValueError("points contain nan or inf coordinates")
    dim = p.shape[1]
    per_frame = tile_size * tile_size * spp
    need = nb_frames * per_frame
    if p.shape[0] >= need:
        data = p[:need].reshape(nb_frames, tile_size, tile_size * spp * dim)
    elif p.shape[0] >= per_frame:
        frame = p[:per_frame].reshape(1, tile_size, tile_size * spp * dim)
        data = np.repeat(frame, nb_frames, axis=0)
    else:
        raise ValueError(f"need at least {per_frame} points for a {tile_size}x{tile_size}x{spp} tile, got {p.shape[0]}")
    return Tile(data=data.copy(), spp=spp, dim=dim)


def render_tile_header(tile: Tile) -> str:
    """Return the C header declaring the tile array and its wrapping accessor."""

    nb_frames, tile_size, width = tile.data.shape
    values = tile.data.astype(np.float32)
    frames = []
    for f in range(nb_frames):
        rows = ["{" + ",".join("%.9g" % x for x in values[f, i]) + "}" for i in range(tile_size)]
        frames.append("{" + ",".join(rows) + "}")

    out = ["#pragma once\n\n\n"]
    out.append(f"const float tile[{nb_frames}][{tile_size}][{width}] = {{")
    out.append(",".join(frames))
    out.append("};")
    out.append("\n\n\n")
    out.append("float sample(int f,int i, int j, int s, int d){\n")
    out.append(
        f"\treturn tile[f%{nb_frames}][i%{tile_size}]"
        f"[(j%{tile_size})*{tile.spp}*{tile.dim}+(s%{tile.spp})*{tile.dim}+(d%{tile.dim})];\n"
    )
    out.append("}\n")
    return "".join(out)


def export_sampler(points: np.ndarray, filename, tile_size: int, spp: int, nb_frames: int = 1) -> Path:
    """Write ``points`` as a static tile header to ``filename``.

    The file is truncated first. Returns the written path; raises ExportError
    if the file cannot be opened or written.
    """

    tile = build_tile(points, tile_size, spp, nb_frames)
    text = render_tile_header(tile)
    path = Path(filename)
    try:
        with open(path, "w", encoding="ascii") as fh:
            fh.write(text)
    except OSError as e:
        raise ExportError(f"cannot write tile header to {path}: {e}") from e
    logger.debug("exported %d frame(s) of %dx%d tile (spp=%d, dim=%d) to %s",
                 nb_frames, tile_size, tile_size, spp, tile.dim, path)
    return path


_ARRAY_RE = re.compile(r"const float tile\[(\d+)\]\[(\d+)\]\[(\d+)\]\s*=\s*\{(.*?)\};", re.S)
_ACCESS_RE = re.compile(r"\(j%(\d+)\)\*(\d+)\*(\d+)\+")


def load_tile(filename) -> Tile:
    """Parse a header written by :func:`export_sampler` back into a Tile."""

    text = Path(filename).read_text(encoding="ascii")
    m = _ARRAY_RE.search(text)
    a = _ACCESS_RE.search(text)
    if m is None or a is None:
        raise ValueError(f"{filename} is not a tile header")
    nb_frames, tile_size, width = (int(g) for g in m.groups()[:3])
    spp, dim = int(a.group(2)), int(a.group(3))
    body = m.group(4).replace("{", "").replace("}", "")
    values = np.array([float(x) for x in body.split(",")], dtype=np.float32)
    if values.size != nb_frames * tile_size * width:
        raise ValueError(f"{filename}: expected {nb_frames * tile_size * width} values, found {values.size}")
    return Tile(data=values.reshape(nb_frames, tile_size, width), spp=spp, dim=dim)
