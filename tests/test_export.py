import numpy as np
import pytest

from slicedoptim.rng import make_rng
from slicedoptim.export import (
    ExportError,
    build_tile,
    export_sampler,
    load_tile,
    render_tile_header,
    tile_sample,
)


def test_sample_wraps_every_index():
    pts = make_rng(0).random((4 * 4 * 2, 2))
    tile = build_tile(pts, tile_size=4, spp=2, nb_frames=1)
    for j in range(4):
        for s in range(2):
            for d in range(2):
                ref = tile.sample(0, 0, j, s, d)
                assert tile.sample(0, 4, j, s, d) == ref
                assert tile.sample(0, 8, j, s, d) == ref
                assert tile.sample(3, -4, j + 4, s + 2, d + 2) == ref


def test_layout_matches_point_order():
    tile_size, spp, frames = 3, 2, 2
    pts = make_rng(1).random((frames * tile_size * tile_size * spp, 3))
    tile = build_tile(pts, tile_size, spp, frames)
    assert tile.data.shape == (frames, tile_size, tile_size * spp * 3)
    f, i, j, k = 1, 2, 0, 1
    idx = ((f * tile_size + i) * tile_size + j) * spp + k
    for d in range(3):
        assert tile.sample(f, i, j, k, d) == pts[idx, d]


def test_too_few_points():
    with pytest.raises(ValueError):
        build_tile(np.zeros((10, 2)), tile_size=4, spp=1)


def test_tile_sample_checks_row_width():
    with pytest.raises(ValueError):
        tile_sample(np.zeros((1, 2, 5)), 0, 0, 0, 0, 0, spp=1, dim=2)


def test_header_text():
    pts = np.array([[0.25, 0.5], [0.75, 0.125], [0.5, 0.5], [0.0, 1.0 / 3.0]])
    text = render_tile_header(build_tile(pts, tile_size=2, spp=1))
    assert text.startswith("#pragma once\n\n\n")
    assert "const float tile[1][2][4] = {{{0.25,0.5,0.75,0.125},{0.5,0.5,0,0.333333343}}};" in text
    assert "\treturn tile[f%1][i%2][(j%2)*1*2+(s%1)*2+(d%2)];\n" in text
    assert text.endswith("}\n")


def test_export_and_load_round_trip(tmp_path):
    pts = make_rng(2).random((2 * 4 * 4 * 2, 2))
    out = export_sampler(pts, tmp_path / "tile.h", tile_size=4, spp=2, nb_frames=2)
    assert out.exists()
    loaded = load_tile(out)
    assert (loaded.nb_frames, loaded.tile_size, loaded.spp, loaded.dim) == (2, 4, 2, 2)
    expected = build_tile(pts, 4, 2, 2).data.astype(np.float32)
    np.testing.assert_array_equal(loaded.data, expected)
    for i in (0, 4, 8):
        assert loaded.sample(0, i, 1, 1, 0) == loaded.sample(0, 0, 1, 1, 0)


def test_export_truncates_existing_file(tmp_path):
    target = tmp_path / "tile.h"
    target.write_text("x" * 10_000)
    export_sampler(np.zeros((1, 1)), target, tile_size=1, spp=1)
    assert "x" not in target.read_text()


def test_export_failure_is_reported(tmp_path):
    missing_dir = tmp_path / "nope" / "tile.h"
    with pytest.raises(ExportError):
        export_sampler(np.zeros((4, 2)), missing_dir, tile_size=2, spp=1)


def test_load_rejects_other_files(tmp_path):
    p = tmp_path / "other.h"
    p.write_text("int x = 3;\n")
    with pytest.raises(ValueError):
        load_tile(p)


def test_single_tile_repeats_across_frames(tmp_path):
    # one tile's worth of points fills every frame with the same tile
    pts = make_rng(3).random((2 * 2 * 1, 2))
    tile = build_tile(pts, tile_size=2, spp=1, nb_frames=3)
    assert tile.data.shape == (3, 2, 4)
    for f in range(3):
        np.testing.assert_array_equal(tile.data[f], pts.reshape(2, 4))
    out = export_sampler(pts, tmp_path / "tile.h", tile_size=2, spp=1, nb_frames=2)
    loaded = load_tile(out)
    assert loaded.nb_frames == 2
    np.testing.assert_array_equal(loaded.data[0], loaded.data[1])


def test_partial_second_frame_falls_back_to_repeat():
    pts = make_rng(4).random((6, 2))
    tile = build_tile(pts, tile_size=2, spp=1, nb_frames=2)
    np.testing.assert_array_equal(tile.data[1], pts[:4].reshape(2, 4))


def test_enough_points_give_distinct_frames():
    pts = make_rng(5).random((8, 2))
    tile = build_tile(pts, tile_size=2, spp=1, nb_frames=2)
    np.testing.assert_array_equal(tile.data[1], pts[4:].reshape(2, 4))


@pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
def test_non_finite_points_rejected(bad):
    with pytest.raises(ValueError):
        build_tile(np.array([[bad, 0.5]]), tile_size=1, spp=1)
