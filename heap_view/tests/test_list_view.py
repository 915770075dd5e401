from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from heap_view.list_view import ListViewController
from heap_view.painter_adapter import PathPainterAdapter
from heap_view.tests.fakes import FakeMetrics
from heap_view.view_state import ViewState
from heap_view.vis_objects import Link, Named, Unnamed, VisObject


class NullPainter(PathPainterAdapter):
    def __init__(self) -> None:
        self.texts: List[str] = []
        self.depth = 0

    def show_text(self, text: str) -> None:
        self.texts.append(text)

    def save(self) -> None:
        self.depth += 1

    def restore(self) -> None:
        self.depth -= 1


class FakeCanvas:
    def __init__(self, width: int = 1000, height: int = 400) -> None:
        self._width = width
        self._height = height
        self.updates = 0
        self.pointer: Optional[Tuple[float, float]] = None

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def update(self) -> None:
        self.updates += 1

    def pointer_position(self) -> Optional[Tuple[float, float]]:
        return self.pointer


class FakeSource:
    """Returns preset rows; records evaluate and update signals."""

    def __init__(self, rows: Dict[str, List[VisObject]]) -> None:
        self.rows = rows
        self.evaluated: List[str] = []
        self.signals = 0
        self.parsed: List[Sequence[Tuple[Any, str]]] = []

    def parse(self, boxes: Sequence[Tuple[Any, str]]) -> List[List[VisObject]]:
        self.parsed.append(boxes)
        return [self.rows[ref] for ref, _ in boxes]

    def evaluate(self, label: str) -> None:
        self.evaluated.append(label)

    def signal(self) -> None:
        self.signals += 1


METRICS = FakeMetrics({"1 # ": 40.0, "y": 10.0, "x: ": 20.0})


def _controller(rows: Optional[Dict[str, List[VisObject]]] = None) -> Tuple[ListViewController, FakeSource]:
    source = FakeSource(rows or {"ref-x": [Unnamed("1 # "), Link("y")]})
    controller = ListViewController(source.parse, source.evaluate, source.signal)
    return controller, source


def _drawn(controller: ListViewController, canvas: FakeCanvas) -> None:
    controller.update_objects([("ref-x", "x")])
    controller.redraw(canvas, NullPainter(), METRICS)


def test_update_objects_pairs_labels_with_parsed_rows():
    controller, source = _controller()
    canvas = FakeCanvas()
    controller.update_objects([("ref-x", "x")], canvas)

    (entry,) = controller.state.objects
    assert entry.name == "x"
    assert entry.objects == (Unnamed("1 # "), Link("y"))
    assert source.parsed == [[("ref-x", "x")]]
    assert canvas.updates == 1


def test_redraw_replaces_bounds_and_paints_names():
    controller, _ = _controller()
    canvas = FakeCanvas()
    controller.update_objects([("ref-x", "x")])
    painter = NullPainter()

    frame = controller.redraw(canvas, painter, METRICS)

    assert painter.texts == ["x: ", "1 # ", "y"]
    assert painter.depth == 0
    assert controller.bounds.entries == frame.bounds
    assert [label for label, _ in controller.bounds] == ["y"]


def test_redraw_twice_yields_identical_bounds():
    controller, _ = _controller()
    canvas = FakeCanvas()
    _drawn(controller, canvas)
    first = controller.bounds.entries
    controller.redraw(canvas, NullPainter(), METRICS)
    assert controller.bounds.entries == first


def test_stale_bounds_are_dropped_on_next_redraw():
    controller, source = _controller({"ref-x": [Link("y")], "ref-z": [Unnamed("plain")]})
    canvas = FakeCanvas()
    controller.update_objects([("ref-x", "x")])
    controller.redraw(canvas, NullPainter(), METRICS)
    assert len(controller.bounds) == 1

    controller.update_objects([("ref-z", "z")])
    controller.redraw(canvas, NullPainter(), METRICS)
    assert len(controller.bounds) == 0


def test_hover_enters_stays_and_leaves():
    controller, _ = _controller()
    canvas = FakeCanvas()
    _drawn(controller, canvas)
    _, box = controller.bounds.entries[0]
    updates_before = canvas.updates

    canvas.pointer = (box.x + box.width / 2, box.y + box.height / 2)
    assert controller.move(canvas) is True
    assert controller.hover == "y"
    assert canvas.updates == updates_before + 1

    canvas.pointer = (box.x + 1.0, box.y + 1.0)
    assert controller.move(canvas) is False
    assert canvas.updates == updates_before + 1

    canvas.pointer = (0.0, 0.0)
    assert controller.move(canvas) is True
    assert controller.hover is None
    assert canvas.updates == updates_before + 2


def test_move_without_pointer_clears_hover():
    controller, _ = _controller()
    canvas = FakeCanvas()
    _drawn(controller, canvas)
    controller.state.hover = "y"
    canvas.pointer = None
    assert controller.move(canvas) is True
    assert controller.hover is None


def test_click_on_hovered_link_evaluates_and_signals():
    controller, source = _controller()
    canvas = FakeCanvas()
    _drawn(controller, canvas)
    _, box = controller.bounds.entries[0]
    canvas.pointer = (box.x + box.width / 2, box.y + box.height / 2)
    controller.move(canvas)

    assert controller.click() is True
    assert source.evaluated == ["y"]
    assert source.signals == 1


def test_click_without_hover_is_a_no_op():
    controller, source = _controller()
    assert controller.click() is False
    assert source.evaluated == []
    assert source.signals == 0


def test_click_failure_is_logged_and_propagated(caplog):
    def boom(label: str) -> None:
        raise RuntimeError(f"cannot evaluate {label}")

    signals: List[int] = []
    controller = ListViewController(lambda boxes: [], boom, lambda: signals.append(1))
    controller.state.hover = "t0"
    with caplog.at_level(logging.ERROR, logger="HeapView.Client"):
        with pytest.raises(RuntimeError):
            controller.click()
    assert signals == []
    assert any("t0" in record.getMessage() for record in caplog.records)


def test_update_keeps_hover_only_while_label_exists():
    rows = {"a": [Named("b0", (Link("t0"),))], "b": [Unnamed("3")]}
    controller, _ = _controller(rows)
    controller.update_objects([("a", "xs")])
    controller.state.hover = "t0"

    controller.update_objects([("a", "xs"), ("b", "n")])
    assert controller.hover == "t0"

    controller.update_objects([("b", "n")])
    assert controller.hover is None


def test_paint_does_not_touch_hit_index():
    controller, _ = _controller()
    canvas = FakeCanvas()
    _drawn(controller, canvas)
    before = controller.bounds.entries

    frame = controller.paint(200, 100, NullPainter(), METRICS)

    assert controller.bounds.entries == before
    assert frame.bounds != before


def test_empty_view_redraws_without_error():
    controller, _ = _controller()
    frame = controller.redraw(FakeCanvas(0, 0), NullPainter(), METRICS)
    assert frame.bounds == ()
    assert frame.natural_width == 1.0
    assert frame.natural_height == 0.0


def test_shared_state_is_used_by_the_controller():
    state = ViewState()
    controller = ListViewController(lambda boxes: [], lambda label: None, lambda: None, state=state)
    assert controller.state is state
    with state.lock:
        with state.lock:
            state.hover = "nested"
    assert controller.hover == "nested"
