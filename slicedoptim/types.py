from dataclasses import dataclass
from typing import Optional


@dataclass
class TileParams:
    tile_size: int
    spp: int  # samples per pixel
    nb_frames: int = 1

    @property
    def num_points(self) -> int:
        return self.nb_frames * self.tile_size * self.tile_size * self.spp


@dataclass
class SamplingParams:
    dim: int
    seed: int = 1234
    init: str = "cube"  # "cube" or "ball"
    points_file: Optional[str] = None  # .npy or whitespace separated text
