import asyncio
import logging

import numpy as np
import pytest

from fakes import FakeClock, FakeEngine, FakeSleep, RecordingBlitter
from startrip.errors import BufferLengthError
from startrip.pipeline import RenderPipeline
from startrip.state import RenderState


def make_pipeline(engine=None, on_pause=None, **kwargs):
    engine = engine or FakeEngine()
    blitter = RecordingBlitter()
    state = RenderState()
    sleep = FakeSleep(log=blitter.ops, on_pause=on_pause)
    pipeline = RenderPipeline(engine, blitter, state, sleep=sleep, **kwargs)
    return pipeline, engine, blitter, state, sleep


def test_clear_precedes_every_content_draw():
    engine = FakeEngine(width=4, height=3)
    engine.buffer[:] = np.arange(1, 13)
    pipeline, _, blitter, _, _ = make_pipeline(engine)
    asyncio.run(pipeline.render_full(False))

    cells = 4 * 3
    clears = blitter.ops[:cells]
    assert all(op[:2] == ("draw", 0) for op in clears)
    assert {op[2:] for op in clears} == {(r, c) for r in range(3) for c in range(4)}


def test_scan_is_row_major_with_and_without_pacing():
    engine = FakeEngine(width=3, height=2)
    engine.buffer[:] = [5, 0, 7, 32, 9, 10]
    expected = [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]

    for paced in (False, True):
        pipeline, _, blitter, _, _ = make_pipeline(engine)
        asyncio.run(pipeline.render_full(paced))
        scan = [op for op in blitter.ops[6:] if op[0] == "draw"]
        positions = []
        for op in scan:
            if not positions or positions[-1] != op[2:]:
                positions.append(op[2:])
        assert positions == expected


def test_blank_tiles_are_never_highlighted():
    engine = FakeEngine(width=4, height=1)
    engine.buffer[:] = [0, 32, 0, 32]
    pipeline, _, blitter, _, sleep = make_pipeline(engine)
    report = asyncio.run(pipeline.render_full(True))

    assert not [op for op in blitter.ops if op[0] == "highlight"]
    assert sleep.delays == []
    assert report.paced == 0
    assert report.skipped == 0


@pytest.mark.parametrize("k", [1, 2, 4])
def test_skip_mid_scan_keeps_drawing_remaining_cells(k):
    engine = FakeEngine(width=5, height=2)
    engine.buffer[:] = [65, 0, 66, 67, 32, 68, 69, 0, 70, 71]
    non_blank = 7
    state_holder = {}

    def on_pause(count):
        if count == k:
            state_holder["state"].skip()

    pipeline, _, blitter, state, sleep = make_pipeline(engine, on_pause=on_pause)
    state_holder["state"] = state
    report = asyncio.run(pipeline.render_full(True))

    assert report.paced == k
    assert report.skipped == non_blank - k
    assert len(sleep.delays) == k
    assert len([op for op in blitter.ops if op[0] == "highlight"]) == k
    for index, tile in enumerate(engine.buffer):
        assert blitter.cells[divmod(index, 5)] == tile
    assert report.interrupted


def test_pacing_resets_after_skipped_draw():
    engine = FakeEngine(width=3, height=1)
    engine.buffer[:] = [65, 66, 67]
    holder = {}
    pipeline, _, _, state, sleep = make_pipeline(engine, on_pause=lambda n: holder["state"].skip())
    holder["state"] = state

    first = asyncio.run(pipeline.render_full(True))
    assert first.paced == 1
    assert state.pacing_enabled is True

    pipeline.state.skip()
    asyncio.run(pipeline.render_full(False))
    assert state.pacing_enabled is True


def test_draw_in_progress_only_during_render_full():
    engine = FakeEngine(width=2, height=1)
    engine.buffer[:] = [65, 66]
    seen = []
    holder = {}
    pipeline, _, _, state, _ = make_pipeline(engine, on_pause=lambda n: seen.append(holder["state"].draw_in_progress))
    holder["state"] = state

    assert state.draw_in_progress is False
    asyncio.run(pipeline.render_full(True))
    assert seen == [True, True]
    assert state.draw_in_progress is False


def test_draw_in_progress_cleared_when_draw_fails():
    engine = FakeEngine(width=2, height=1)
    engine.buffer[:] = [65, 66]

    holder = {}

    def boom(_count):
        holder["state"].skip()
        raise RuntimeError("boom")

    pipeline, _, _, state, _ = make_pipeline(engine, on_pause=boom)
    holder["state"] = state
    with pytest.raises(RuntimeError):
        asyncio.run(pipeline.render_full(True))
    assert state.draw_in_progress is False
    assert state.pacing_enabled is True


def test_screen_view_acquired_fresh_each_draw():
    engine = FakeEngine(width=2, height=1)
    pipeline, _, blitter, _, _ = make_pipeline(engine)
    asyncio.run(pipeline.render_full(False))
    assert engine.reads == 1

    engine.buffer = np.array([7, 8], dtype=np.uint8)
    asyncio.run(pipeline.render_full(False))
    assert engine.reads == 2
    assert blitter.cells == {(0, 0): 7, (0, 1): 8}


def test_wrong_buffer_length_raises():
    engine = FakeEngine(width=2, height=2)
    engine.buffer = np.zeros(3, dtype=np.uint8)
    pipeline, _, _, state, _ = make_pipeline(engine)
    with pytest.raises(BufferLengthError):
        asyncio.run(pipeline.render_full(False))
    assert state.draw_in_progress is False


def test_console_only_touches_bottom_row():
    engine = FakeEngine(width=4, height=3)
    engine.buffer[:] = 1
    engine.line[:] = [67, 79, 77, 0]
    pipeline, _, blitter, state, _ = make_pipeline(engine)
    asyncio.run(pipeline.render_full(False))
    before = blitter.snapshot()

    report = pipeline.render_console()
    after = blitter.snapshot()

    changed = {cell for cell in after if after[cell] != before[cell]}
    assert changed <= {(2, c) for c in range(4)}
    assert [after[(2, c)] for c in range(4)] == [67, 79, 77, 0]
    assert report.cells == 4
    assert state.draw_in_progress is False


def test_console_never_paced():
    engine = FakeEngine(width=3, height=2)
    engine.line[:] = [65, 66, 67]
    pipeline, _, blitter, state, sleep = make_pipeline(engine)
    pipeline.render_console()
    assert sleep.delays == []
    assert not [op for op in blitter.ops if op[0] == "highlight"]
    assert state.pacing_enabled is True


def test_single_tile_scenario():
    engine = FakeEngine(width=20, height=10, delay=20)
    engine.buffer[5 * 20 + 10] = 65
    pipeline, _, blitter, _, sleep = make_pipeline(engine)
    asyncio.run(pipeline.render_full(True))

    scan = blitter.ops[200:]
    assert len([op for op in scan if op[:2] == ("draw", 0)]) == 199
    at = 5 * 20 + 10
    assert scan[at : at + 4] == [
        ("draw", 65, 5, 10),
        ("highlight", 5, 10),
        ("pause", 0.02),
        ("draw", 65, 5, 10),
    ]
    assert sleep.delays == [0.02]

    unpaced, _, plain, _, _ = make_pipeline(engine)
    asyncio.run(unpaced.render_full(False))
    assert plain.snapshot() == blitter.snapshot()


def test_animate_off_never_pauses():
    engine = FakeEngine(width=2, height=1)
    engine.buffer[:] = [65, 66]
    pipeline, _, _, _, sleep = make_pipeline(engine, animate=False)
    report = asyncio.run(pipeline.render_full(True))
    assert sleep.delays == []
    assert report.paced == 0


def test_report_elapsed_uses_clock(caplog):
    engine = FakeEngine(width=2, height=1)
    engine.buffer[:] = [65, 66]
    clock = FakeClock()
    holder = {}

    def on_pause(count):
        clock.advance(0.5)
        holder["state"].skip()

    pipeline, _, _, state, _ = make_pipeline(engine, on_pause=on_pause, clock=clock)
    holder["state"] = state
    with caplog.at_level(logging.INFO, logger="startrip.pipeline"):
        report = asyncio.run(pipeline.render_full(True))

    assert report.elapsed == pytest.approx(0.5)
    assert "skipped after 1 of 2" in "".join(caplog.messages)


def test_key_during_real_pause_skips_rest():
    engine = FakeEngine(width=4, height=1, delay=0)
    engine.buffer[:] = [65, 66, 67, 68]
    state = RenderState()
    pipeline = RenderPipeline(engine, RecordingBlitter(), state)

    async def scenario():
        render = asyncio.create_task(pipeline.render_full(True))
        await asyncio.sleep(0)
        assert state.draw_in_progress
        state.skip()
        return await render

    report = asyncio.run(scenario())
    assert report.paced == 1
    assert report.skipped == 3
