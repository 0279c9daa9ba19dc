from schemata.nodes import ObjectSchema, array, obj, ref, string, union
from schemata.registry import extract_references, references_by_id


def test_collects_targets_in_first_seen_order():
    schema = obj(
        {
            "b": ref("B"),
            "items": array(ref("C")),
            "choice": union(ref("D"), ref("B"), string()),
        },
        id="A",
    )
    assert extract_references(schema) == ("B", "C", "D")


def test_references_are_leaves():
    target = obj({"inner": ref("Deep")}, id="Target")
    node = ref("Target")
    # a ref node never exposes the target body, so "Deep" is not reached
    assert extract_references(obj({"t": node}, id="X")) == ("Target",)
    assert extract_references(target) == ("Deep",)


def test_additional_properties_schema_is_walked():
    schema = obj({}, additional_properties=ref("Value"), id="Map")
    assert extract_references(schema) == ("Value",)


def test_inline_cycle_terminates():
    node = ObjectSchema(id="Loop")
    node.properties = {"self": node, "other": ref("Other")}
    assert extract_references(node) == ("Other",)


def test_shared_subtree_counted_once():
    shared = obj({"r": ref("R")})
    schema = obj({"a": shared, "b": shared}, id="S")
    assert extract_references(schema) == ("R",)


def test_references_by_id():
    a = obj({"b": ref("B")}, id="A")
    b = obj({"x": string()}, id="B")
    assert references_by_id({"A": a, "B": b}) == {"A": ("B",), "B": ()}
