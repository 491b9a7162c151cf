import asyncio
import sys
import types

from fakes import FakeEngine


class FakeCtx:
    def __init__(self) -> None:
        self.calls = []

    def drawImage(self, *args):
        self.calls.append(("drawImage",) + args)

    def fillRect(self, *args):
        self.calls.append(("fillRect",) + args)

    def save(self):
        self.calls.append(("save",))

    def restore(self):
        self.calls.append(("restore",))


class FakeInput:
    def __init__(self) -> None:
        self.value = "typed"
        self.focus_calls = []

    def focus(self, **kwargs):
        self.focus_calls.append(kwargs)


# Stub out browser-specific modules used by run_canvas
window = types.SimpleNamespace(innerWidth=1024, innerHeight=768)
js = types.SimpleNamespace(
    document=types.SimpleNamespace(
        getElementById=lambda *_args, **_kwargs: None,
        createElement=lambda *_args, **_kwargs: types.SimpleNamespace(prepend=lambda _x: None),
    ),
    window=window,
    Image=types.SimpleNamespace(new=lambda: types.SimpleNamespace()),
)
sys.modules['js'] = js
ffi = types.SimpleNamespace(create_proxy=lambda f: f)
pyodide = types.SimpleNamespace(ffi=ffi)
sys.modules['pyodide'] = pyodide
sys.modules['pyodide.ffi'] = ffi

from startrip.atlas import TileAtlas
from startrip.run_canvas import CanvasBlitter, Runner
from startrip.state import Lifecycle


def make_runner(engine=None):
    engine = engine or FakeEngine(width=4, height=2, delay=0)
    runner = Runner(engine=engine)
    runner.input = FakeInput()
    ctx = FakeCtx()
    runner.setup(ctx, "image")
    return runner, engine, ctx


def test_canvas_blitter_draws_atlas_cell():
    ctx = FakeCtx()
    blitter = CanvasBlitter(ctx, "image", TileAtlas(tile_size=16, num_tiles=16))
    blitter.draw_tile(65, 2, 3)
    assert ctx.calls == [("drawImage", "image", 16, 64, 16, 16, 48, 32, 16, 16)]


def test_canvas_highlight_restores_context():
    ctx = FakeCtx()
    CanvasBlitter(ctx, "image", TileAtlas()).highlight(1, 1)
    assert ctx.calls[0] == ("save",)
    assert ctx.calls[-1] == ("restore",)
    assert ("fillRect", 16, 16, 16, 16) in ctx.calls


def test_click_starts_and_keys_clear_echo():
    runner, engine, ctx = make_runner()

    asyncio.run(runner._on_click())
    assert engine.calls == ["intro"]
    assert runner.input.focus_calls == [{"preventScroll": True}]
    assert runner.dispatcher.lifecycle is Lifecycle.STARTED
    assert any(call[0] == "fillRect" for call in ctx.calls)

    asyncio.run(runner._on_key(types.SimpleNamespace(key="a")))
    assert engine.calls[-1] == ("input", ord("a"))
    assert runner.input.value == ""


def test_keys_before_click_leave_echo_alone():
    runner, engine, _ = make_runner()
    asyncio.run(runner._on_key(types.SimpleNamespace(key="a")))
    assert engine.calls == []
    assert runner.input.value == "typed"


def test_resize_applies_viewport_style():
    runner, _, _ = make_runner()
    runner.canvas = types.SimpleNamespace(width=800, height=400, style=types.SimpleNamespace())
    window.innerWidth, window.innerHeight = 700, 300
    fit = runner.resize()
    assert fit.mode == "height"
    assert runner.canvas.style.height == "90%"

    window.innerWidth, window.innerHeight = 400, 800
    runner.resize()
    assert runner.canvas.style.width == "90%"

    window.innerWidth, window.innerHeight = 1024, 768
    runner.resize()
    assert runner.canvas.style.width == "800px"
