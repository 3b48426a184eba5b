import json

import numpy as np

from ndpipe import from_array


def _double(value):
    return value * 2


def _build_pipeline():
    return from_array(np.arange(6, dtype=np.int32)).map_to(np.float64, _double).filter(bool)


def test_explain_text_lists_each_step():
    text = _build_pipeline().explain()
    lines = text.splitlines()
    assert len(lines) == 3
    assert lines[0] == "[0] supply: depth=1 grain=int32 shape=(6,) source=ndarray"
    assert lines[1] == "[1] map_to: depth=1 grain=float64 func=_double"
    assert lines[2].startswith("[2] filter: depth=1 grain=float64 func=bool")
    assert lines[2].endswith("(drains upstream at build time)")


def test_explain_json_is_serializable():
    payload = _build_pipeline().explain(json=True)
    assert payload["depth"] == 1
    assert payload["grain_type"] == "float64"
    assert [step["kind"] for step in payload["steps"]] == ["supply", "map_to", "filter"]
    assert payload["steps"][0]["shape"] == [6]
    assert payload["steps"][2]["eager"] is True
    json.dumps(payload)


def test_explain_reports_nested_grain():
    payload = from_array(np.zeros((2, 3, 4), dtype=np.uint8), 2).explain(json=True)
    supply = payload["steps"][0]
    assert supply["shape"] == [2, 3]
    assert supply["depth"] == 2
    assert "(4,)" in supply["grain_type"]


def test_repr_mentions_depth_and_steps():
    text = repr(from_array([1, 2]).map(abs))
    assert "depth=1" in text
    assert "steps=2" in text
