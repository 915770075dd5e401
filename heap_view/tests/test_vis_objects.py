from __future__ import annotations

from heap_view.vis_objects import (
    BoundingBox,
    Function,
    Link,
    Named,
    TopLevelEntry,
    Unnamed,
    collect_keys,
    iter_objects,
    object_key,
)


def test_object_keys_per_variant():
    assert object_key(Unnamed("1")) is None
    assert object_key(Named("b0", ())) == "b0"
    assert object_key(Link("t0")) == "t0"
    assert object_key(Function("map")) == "map"


def test_named_children_are_normalised_to_tuple():
    named = Named("b0", [Unnamed("1")])  # type: ignore[arg-type]
    assert named.children == (Unnamed("1"),)
    assert hash(named) == hash(Named("b0", (Unnamed("1"),)))


def test_iter_objects_walks_parents_first():
    tree = [Named("b0", (Unnamed("1"), Named("b1", (Link("t0"),)))), Function("f")]
    kinds = [type(obj).__name__ for obj in iter_objects(tree)]
    assert kinds == ["Named", "Unnamed", "Named", "Link", "Function"]


def test_collect_keys_spans_all_entries():
    entries = [
        TopLevelEntry("xs", [Named("b0", (Link("t0"),))]),  # type: ignore[arg-type]
        TopLevelEntry("ys", (Unnamed("3"),)),
    ]
    assert collect_keys(entries) == ["b0", "t0"]


def test_bounding_box_helpers():
    box = BoundingBox(1.0, 2.0, 3.0, 4.0)
    assert box.contains(1.0, 2.0)
    assert box.contains(4.0, 6.0)
    assert not box.contains(4.5, 6.0)
    assert box.translated(10.0, -2.0) == BoundingBox(11.0, 0.0, 3.0, 4.0)
