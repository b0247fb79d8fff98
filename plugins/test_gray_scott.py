#!/usr/bin/env python3
"""
Tests for the Gray-Scott step operator and engine lifecycle.

Verifies:
1. Laplacian stencil table
2. Step against a plain per-cell reference (no neighbour leakage)
3. Boundary, range and fixed-point behavior
4. Buffer swap without reallocation
5. Injection, reset, resize and parameter updates
6. Determinism
7. Host calls serialised against a running step
"""

import threading

import numpy as np
import pytest

from reaction_diffusion import gray_scott
from reaction_diffusion.errors import InvalidDimensionError
from reaction_diffusion.gray_scott import LAPLACIAN_STENCIL, GrayScott
from reaction_diffusion.params import Params


def _randomize(engine, seed=0):
    rng = np.random.default_rng(seed)
    engine.current.cells[:] = rng.random(engine.current.cells.shape)


def _reference_step(cells, p):
    """Straight per-cell loop in float64, reading only the input array."""
    h, w, _ = cells.shape
    src = cells.astype(np.float64)
    out = src.copy()
    for y in range(1, h - 1):
        for x in range(1, w - 1):
            lap = np.zeros(2)
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    lap += LAPLACIAN_STENCIL[dy + 1, dx + 1] * src[y + dy, x + dx]
            a, b = src[y, x]
            abb = a * b * b
            na = a + (p.dA * lap[0] - abb + p.feed * (1 - a)) * p.dt
            nb = b + (p.dB * lap[1] + abb - (p.kill + p.feed) * b) * p.dt
            out[y, x] = (min(max(na, 0.0), 1.0), min(max(nb, 0.0), 1.0))
    return out


def test_stencil_weights_sum_to_zero():
    print("Testing stencil table...")
    assert LAPLACIAN_STENCIL.shape == (3, 3)
    assert abs(LAPLACIAN_STENCIL.sum()) < 1e-9, f"Stencil sum: {LAPLACIAN_STENCIL.sum()}"
    assert LAPLACIAN_STENCIL[1, 1] == -1.0
    for y, x in [(0, 1), (1, 0), (1, 2), (2, 1)]:
        assert LAPLACIAN_STENCIL[y, x] == 0.2
    for y, x in [(0, 0), (0, 2), (2, 0), (2, 2)]:
        assert LAPLACIAN_STENCIL[y, x] == 0.05
    print("  ✓ Stencil weights correct")


def test_step_matches_reference():
    """Every interior cell is computed from pre-step values only."""
    print("Testing step against reference...")
    params = Params(dA=0.9, dB=0.4, feed=0.04, kill=0.06, dt=0.8)
    engine = GrayScott(13, 9, params)
    _randomize(engine, seed=3)
    before = engine.current.cells.copy()

    engine.step()

    expected = _reference_step(before, params)
    assert np.allclose(engine.current.cells, expected, atol=1e-5), \
        f"Max error: {np.abs(engine.current.cells - expected).max()}"
    print("  ✓ Step matches reference")


def test_boundary_cells_are_frozen():
    print("Testing boundary invariance...")
    engine = GrayScott(16, 11)
    _randomize(engine, seed=7)
    before = engine.current.cells.copy()

    for _ in range(6):
        engine.step()
        cells = engine.current.cells
        assert np.array_equal(cells[0], before[0])
        assert np.array_equal(cells[-1], before[-1])
        assert np.array_equal(cells[:, 0], before[:, 0])
        assert np.array_equal(cells[:, -1], before[:, -1])
    print("  ✓ Boundary cells unchanged")


def test_values_stay_in_unit_range():
    """Even wildly out-of-range rates only saturate."""
    print("Testing range invariant...")
    engine = GrayScott(24, 24, Params(dA=4.0, dB=3.0, feed=0.6, kill=0.9, dt=2.5))
    _randomize(engine, seed=11)
    for _ in range(25):
        view = engine.step()
        assert view.a.min() >= 0.0 and view.a.max() <= 1.0
        assert view.b.min() >= 0.0 and view.b.max() <= 1.0
    print("  ✓ Concentrations clamped to [0, 1]")


def test_uniform_region_is_exact_fixed_point():
    """50x50 defaults, 15 half-size seed: cells far from the seed stay (1, 0)."""
    print("Testing steady-state scenario...")
    engine = GrayScott(50, 50, Params(dA=1.0, dB=0.5, feed=0.055, kill=0.062, dt=1.0,
                                      pattern_half_size=15))
    seeded = engine.current.b == 1.0
    assert int(seeded.sum()) == 30 * 30
    assert seeded[10:40, 10:40].all()

    view = engine.step()

    far = np.ones((50, 50), dtype=bool)
    far[9:41, 9:41] = False
    assert np.all(view.a[far] == 1.0), "untouched uniform cells must keep a == 1 exactly"
    assert np.all(view.b[far] == 0.0), "untouched uniform cells must keep b == 0 exactly"

    # Inside the seed: lap = 0, abb = 1 -> a' = 0, b' saturates at 1
    assert view.get(25, 25) == (0.0, 1.0)
    # Just left of the seed edge: lapB = 0.05 + 0.2 + 0.05, b' = dB * 0.3
    a, b = view.get(9, 25)
    assert a == 1.0
    assert b == pytest.approx(0.15, abs=1e-6)
    print("  ✓ Uniform regions are fixed points")


def test_swap_reuses_buffers():
    print("Testing buffer swap...")
    engine = GrayScott(12, 12)
    front, back = engine.current, engine.scratch
    front_data = front.data

    engine.step()
    assert engine.current is back and engine.scratch is front, "roles must swap"
    engine.step()
    assert engine.current is front and engine.current.data is front_data, \
        "no buffer may be reallocated by a step"
    assert engine.generation == 2
    print("  ✓ Buffers swap in place")


def test_grid_without_interior_is_preserved():
    print("Testing degenerate grids...")
    for w, h in [(1, 1), (2, 7), (9, 2)]:
        engine = GrayScott(w, h, Params(pattern_half_size=1))
        before = engine.current.cells.copy()
        engine.step_n(3)
        assert np.array_equal(engine.current.cells, before), f"{w}x{h} grid changed"
    print("  ✓ Degenerate grids handled")


def test_inject_forces_b_and_spreads():
    """Injection on a settled field sets b=1 and disturbs neighbours."""
    print("Testing injection scenario...")
    engine = GrayScott(64, 64, Params(pattern_half_size=6))
    engine.step_n(150)

    engine.inject(12, 12, 4)
    view = engine.read_field()
    assert np.all(view.b[8:16, 8:16] == 1.0), "injected square must be b=1"

    neighbour_before = view.get(7, 12)
    changed = False
    for _ in range(5):
        if engine.step().get(7, 12) != neighbour_before:
            changed = True
            break
    assert changed, "reaction should reach a neighbouring cell within 5 steps"
    print("  ✓ Injection working correctly")


def test_inject_defaults_to_injection_half_size():
    engine = GrayScott(40, 40, Params(pattern_half_size=1, injection_half_size=3))
    engine.inject(5, 30)
    assert int((engine.current.b[24:36, 0:12] == 1.0).sum()) == 36


def test_reset_reseeds_center():
    print("Testing reset...")
    engine = GrayScott(30, 20, Params(pattern_half_size=4))
    engine.step_n(10)
    engine.inject(2, 2, 2)

    engine.reset(Params(pattern_half_size=2))
    assert engine.generation == 0
    b = engine.current.b
    assert int(b.sum()) == 16
    assert b[8:12, 13:17].min() == 1.0, "seed centers on (W//2, H//2)"
    assert np.all(engine.current.a == 1.0)
    assert engine.params.pattern_half_size == 2

    engine.reset({"pattern_half_size": 3})
    assert int(engine.current.b.sum()) == 36
    print("  ✓ Reset working correctly")


def test_resize_replaces_storage():
    print("Testing resize...")
    engine = GrayScott(20, 20, Params(pattern_half_size=3))
    old = engine.current
    engine.step_n(4)

    engine.resize(31, 17)
    view = engine.read_field()
    assert view.shape == (17, 31)
    assert engine.size == (31, 17)
    assert engine.current is not old
    assert engine.generation == 0
    assert view.b[5:11, 12:18].min() == 1.0 and int(view.b.sum()) == 36
    engine.step_n(2)

    with pytest.raises(InvalidDimensionError):
        engine.resize(0, 10)
    assert engine.size == (31, 17), "failed resize must leave the engine untouched"
    print("  ✓ Resize working correctly")


def test_params_apply_from_next_step():
    print("Testing parameter updates...")
    engine = GrayScott(8, 8, Params(feed=0.1, dt=1.0))
    engine.current.a[:] = 0.5
    engine.current.b[:] = 0.0

    engine.step()
    assert engine.current.get(3, 3)[0] == pytest.approx(0.55, abs=1e-6)

    engine.set_params(feed=0.0)
    assert engine.current.get(3, 3)[0] == pytest.approx(0.55, abs=1e-6), \
        "setting a parameter must not touch the field"
    engine.step()
    assert engine.current.get(3, 3)[0] == pytest.approx(0.55, abs=1e-6)

    assert engine.get_params()["feed"] == 0.0
    with pytest.raises(KeyError):
        engine.set_params(gamma=1.0)
    print("  ✓ Parameter updates working correctly")


def test_advance_frame_runs_updates_per_step():
    engine = GrayScott(10, 10, Params(updates_per_step=7))
    engine.advance_frame()
    assert engine.generation == 7


def test_determinism():
    print("Testing determinism...")
    params = Params(feed=0.035, kill=0.065, pattern_half_size=5)

    def drive(engine):
        engine.step_n(20)
        engine.inject(8, 30, 3)
        engine.step_n(15)
        engine.set_params(dt=0.7)
        engine.inject(33, 9)
        engine.step_n(10)
        return engine.read_field().copy()

    first = drive(GrayScott(40, 40, params))
    second = drive(GrayScott(40, 40, params))
    assert np.array_equal(first, second), "identical inputs must give identical fields"
    print("  ✓ Simulation is deterministic")


def test_functional_interface():
    engine = gray_scott.initialize(16, 16, {"pattern_half_size": 2})
    assert isinstance(engine, GrayScott)
    gray_scott.advance(engine)
    assert engine.generation == 1
    gray_scott.inject(engine, 3, 3, 1)
    assert gray_scott.read_field(engine).get(2, 2)[1] == 1.0
    gray_scott.reset(engine)
    assert engine.generation == 0
    gray_scott.resize(engine, 10, 12)
    assert gray_scott.read_field(engine).shape == (12, 10)


def test_stats():
    engine = GrayScott(20, 20, Params(pattern_half_size=5))
    stats = engine.stats
    assert stats["generation"] == 0
    assert stats["mass"] == 100.0
    assert stats["alive_pct"] == pytest.approx(25.0)
    assert stats["max"] == 1.0


def _start_blocked(engine, target):
    """Start `target` in a thread while the engine lock is held elsewhere."""
    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    thread.join(timeout=0.2)
    assert thread.is_alive(), "call must wait for the engine lock"
    return thread


def test_inject_waits_for_running_step():
    print("Testing inject serialisation...")
    engine = GrayScott(30, 30, Params(pattern_half_size=2))
    before = engine.current.b.copy()

    with engine._lock:
        thread = _start_blocked(engine, lambda: engine.inject(6, 6, 3))
        assert np.array_equal(engine.current.b, before), "inject must not land mid-step"
    thread.join(timeout=2.0)
    assert not thread.is_alive()
    assert np.all(engine.current.b[3:9, 3:9] == 1.0)
    print("  ✓ Inject serialised")


def test_reset_waits_for_running_step():
    print("Testing reset serialisation...")
    engine = GrayScott(30, 30, Params(pattern_half_size=2))
    engine.step_n(3)
    engine.inject(6, 6, 3)
    before = engine.current.cells.copy()

    with engine._lock:
        thread = _start_blocked(engine, engine.reset)
        assert engine.generation == 3
        assert np.array_equal(engine.current.cells, before), "reset must not land mid-step"
    thread.join(timeout=2.0)
    assert not thread.is_alive()
    assert engine.generation == 0
    assert int(engine.current.b.sum()) == 16
    print("  ✓ Reset serialised")


def test_stats_waits_for_running_step():
    engine = GrayScott(20, 20, Params(pattern_half_size=5))
    results = []

    with engine._lock:
        thread = _start_blocked(engine, lambda: results.append(engine.stats))
        assert results == []
    thread.join(timeout=2.0)
    assert results[0]["mass"] == 100.0


if __name__ == "__main__":
    print("\n=== Testing Gray-Scott Engine ===\n")

    test_stencil_weights_sum_to_zero()
    test_step_matches_reference()
    test_boundary_cells_are_frozen()
    test_values_stay_in_unit_range()
    test_uniform_region_is_exact_fixed_point()
    test_swap_reuses_buffers()
    test_grid_without_interior_is_preserved()
    test_inject_forces_b_and_spreads()
    test_inject_defaults_to_injection_half_size()
    test_reset_reseeds_center()
    test_resize_replaces_storage()
    test_params_apply_from_next_step()
    test_advance_frame_runs_updates_per_step()
    test_determinism()
    test_functional_interface()
    test_stats()
    test_inject_waits_for_running_step()
    test_reset_waits_for_running_step()
    test_stats_waits_for_running_step()

    print("\n✓ All tests passed!\n")
