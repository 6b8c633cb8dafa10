import asyncio

import numpy as np
import pytest

from blobs.config import MAX_VERTICES, SceneConfig
from blobs.path import to_path
from blobs.scene import BlobStyle, Scene


def make_scene(**overrides):
    base = dict(n_blobs=4, vertex_step=3, tick_interval=0.001)
    base.update(overrides)
    return Scene(SceneConfig(**base))


def test_scene_vertex_counts_follow_index():
    scene = make_scene()
    assert [len(e.ring) for e in scene.entries] == [0, 3, 6, 9]
    assert scene.entries[0].path == ""
    assert scene.entries[1].path.startswith("M ")


def test_explicit_vertex_counts_override_step():
    scene = Scene(SceneConfig(vertex_counts=[5, 1]))
    assert len(scene) == 2
    assert scene.config.n_blobs == 2
    assert [len(e.ring) for e in scene.entries] == [5, 1]


def test_style_uses_integer_hue_division():
    config = SceneConfig()
    assert BlobStyle.for_index(1, 40, config).hue == 9
    assert BlobStyle.for_index(39, 40, config).hue == 351
    assert BlobStyle.for_index(1, 7, config).hue == 51
    style = BlobStyle.for_index(1, 40, config)
    assert style.fill == "hsla(9,80%,50%,0.05)"
    assert style.stroke == "rgba(0,0,0,0.01)"


def test_tick_refreshes_path():
    scene = make_scene()
    before = scene.entries[2].path
    path = scene.tick(2)
    entry = scene.entries[2]
    assert entry.ticks == 1
    assert path == entry.path == to_path(entry.ring)
    assert path != before


def test_step_ticks_every_entry_including_empty():
    scene = make_scene()
    scene.step()
    scene.step()
    assert [e.ticks for e in scene.entries] == [2, 2, 2, 2]
    assert scene.entries[0].path == ""


def test_entry_out_of_range():
    scene = make_scene()
    with pytest.raises(IndexError):
        scene.entry(4)
    with pytest.raises(IndexError):
        scene.tick(-1)


def test_reset_restores_initial_rings():
    scene = make_scene()
    initial = scene.entries[3].ring.positions.copy()
    for _ in range(5):
        scene.step()
    scene.reset()
    assert np.array_equal(scene.entries[3].ring.positions, initial)
    assert scene.entries[3].ticks == 0


def test_svg_has_one_path_per_blob():
    scene = make_scene()
    svg = scene.to_svg()
    assert svg.startswith("<svg")
    assert svg.count("<path ") == 4
    assert 'width="1000px"' in svg


def test_snapshot_is_json_ready():
    scene = make_scene()
    snap = scene.snapshot()
    assert [s["index"] for s in snap] == [0, 1, 2, 3]
    assert snap[1]["vertex_count"] == 3
    assert set(snap[1]) == {"index", "vertex_count", "hue", "fill", "stroke", "ticks", "path"}


def test_tick_tasks_run_until_stopped():
    scene = make_scene()

    async def scenario():
        scene.start()
        assert scene.running
        await asyncio.sleep(0.05)
        await scene.stop()
        assert not scene.running
        counts = [e.ticks for e in scene.entries]
        await asyncio.sleep(0.02)
        return counts

    counts = asyncio.run(scenario())
    assert all(c > 0 for c in counts)
    assert [e.ticks for e in scene.entries] == counts


def test_tick_waits_for_entry_lock():
    scene = make_scene()

    async def scenario():
        entry = scene.entries[1]
        await entry.lock.acquire()
        task = asyncio.create_task(scene.tick_async(1))
        await asyncio.sleep(0.01)
        blocked_ticks = entry.ticks
        entry.lock.release()
        await task
        return blocked_ticks, entry.ticks

    blocked, after = asyncio.run(scenario())
    assert blocked == 0
    assert after == 1


@pytest.mark.parametrize("overrides", [
    {"radius": -1.0},
    {"n_blobs": -1},
    {"vertex_step": -2},
    {"vertex_counts": [3, -1]},
    {"tick_interval": 0.0},
    {"frame_interval": -0.1},
    {"width": 0.0},
])
def test_invalid_config_raises(overrides):
    with pytest.raises(ValueError):
        SceneConfig(**overrides)


def test_config_defaults_match_canvas():
    config = SceneConfig()
    assert config.canvas_center == (500.0, 500.0)
    assert config.dt == pytest.approx(0.01)
    counts = config.blob_vertex_counts()
    assert counts[0] == 0
    assert counts[-1] == 390


def test_config_rejects_non_integer_vertex_counts():
    with pytest.raises(TypeError):
        SceneConfig(vertex_counts=[3, 2.7])
    with pytest.raises(TypeError):
        SceneConfig(vertex_counts=[True])


def test_config_caps_vertices_per_blob():
    SceneConfig(vertex_counts=[MAX_VERTICES])
    with pytest.raises(ValueError):
        SceneConfig(vertex_counts=[3, MAX_VERTICES + 1])
    with pytest.raises(ValueError):
        SceneConfig(n_blobs=200, vertex_step=100)
