from __future__ import annotations

import pytest

from heap_view.size_calculator import ink_advance, object_width, objects_height, row_width
from heap_view.tests.fakes import FakeMetrics
from heap_view.vis_objects import Function, Link, Named, Unnamed


def test_leaf_widths_use_plain_advance_plus_margin():
    metrics = FakeMetrics({"1 # ": 40.0, "y": 10.0, "map": 25.0}, bearings={"y": 3.0})
    assert object_width(metrics, Unnamed("1 # ")) == 50.0
    assert object_width(metrics, Link("y")) == 20.0
    assert object_width(metrics, Function("map")) == 35.0


def test_named_width_uses_ink_advance_of_label():
    metrics = FakeMetrics({"b0": 17.0, "1": 8.0}, bearings={"b0": 1.0})
    assert ink_advance(metrics, "b0") == 16.0
    # label wider than the single child
    assert object_width(metrics, Named("b0", (Unnamed("1"),))) == 26.0


def test_named_width_uses_children_sum_when_wider():
    metrics = FakeMetrics({"b0": 17.0, "1": 8.0, "t0": 12.0}, bearings={"b0": 1.0})
    named = Named("b0", (Unnamed("1"), Link("t0")))
    assert object_width(metrics, named) == (18.0 + 22.0) + 10.0
    assert row_width(metrics, [named, Unnamed("1")]) == 50.0 + 18.0


def test_empty_named_and_empty_text_do_not_fail():
    metrics = FakeMetrics()
    assert object_width(metrics, Named("", ())) == 10.0
    assert object_width(metrics, Unnamed("")) == 10.0
    assert objects_height(metrics, []) == 0.0


def test_heights_per_variant():
    metrics = FakeMetrics(line_height=15.0)
    assert objects_height(metrics, [Unnamed("a")]) == 15.0
    assert objects_height(metrics, [Link("a")]) == 25.0
    assert objects_height(metrics, [Function("a")]) == 25.0
    assert objects_height(metrics, [Named("a", ())]) == 30.0
    assert objects_height(metrics, [Named("a", (Link("b"),))]) == 55.0


def test_height_is_max_over_siblings_and_recurses():
    metrics = FakeMetrics(line_height=10.0)
    nested = Named("outer", (Unnamed("x"), Named("inner", (Link("z"),))))
    # outer: 25 + max(10, 25 + 20) = 70
    assert objects_height(metrics, [Unnamed("a"), nested, Link("b")]) == 70.0


def test_zero_metrics_collapse_without_error():
    metrics = FakeMetrics({"a": 0.0}, line_height=0.0)
    assert object_width(metrics, Unnamed("a")) == 10.0
    assert objects_height(metrics, [Named("a", (Unnamed("a"),))]) == 15.0


@pytest.mark.parametrize(
    "children",
    [
        (Unnamed("1"), Link("t0"), Function("f")),
        (Named("inner", (Unnamed("deep"), Link("x"))), Unnamed("2")),
        (Unnamed(""),),
    ],
)
def test_width_never_grows_when_a_child_is_removed(children):
    metrics = FakeMetrics({"label": 30.0})
    full = object_width(metrics, Named("label", children))
    for idx in range(len(children)):
        reduced = children[:idx] + children[idx + 1 :]
        assert object_width(metrics, Named("label", reduced)) <= full


def test_unknown_object_type_is_rejected():
    with pytest.raises(TypeError):
        object_width(FakeMetrics(), "not an object")  # type: ignore[arg-type]
