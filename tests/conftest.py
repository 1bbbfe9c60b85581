import pytest

from engine.scheduler import ManualScheduler
from model.grid import Grid

MAZE = """
S.#.
..#.
.#..
...E
"""

WALLED_OFF = """
S.#.
..#E
..#.
"""


class RecordingRenderer:
    def __init__(self):
        self.frames = []

    def render(self, data, highlight, message, *, theme, context):
        self.frames.append(
            {"data": data, "highlight": highlight, "message": message, "theme": theme, "context": context}
        )

    @property
    def messages(self):
        return [f["message"] for f in self.frames]


class BrokenRenderer:
    def __init__(self):
        self.calls = 0

    def render(self, data, highlight, message, *, theme, context):
        self.calls += 1
        raise RuntimeError("canvas unavailable")


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def broken_renderer():
    return BrokenRenderer()


@pytest.fixture
def open_grid():
    """3x3, start top-left, end bottom-right, no walls."""
    return Grid.from_ascii("S..\n...\n..E")


@pytest.fixture
def maze():
    return Grid.from_ascii(MAZE)


@pytest.fixture
def walled_off():
    return Grid.from_ascii(WALLED_OFF)
