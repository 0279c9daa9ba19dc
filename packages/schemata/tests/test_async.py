import pytest

from schemata.nodes import obj, ref, string


@pytest.mark.asyncio
async def test_aregister_and_aflush(registry, engine):
    await registry.aregister(obj({"a": ref("A")}, id="B"))
    await registry.aregister(obj({"x": string()}, id="A"))

    assert await registry.aflush() == ("A", "B")
    assert engine.commit_order == ("A", "B")
