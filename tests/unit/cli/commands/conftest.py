import json

import pytest

from tokengraph.core.demo import DemoManager


@pytest.fixture
def tokens_file(tmp_path):
    """Demo token system written to disk, as the CLI reads it."""
    return str(DemoManager(tmp_path).provision())


@pytest.fixture
def clean_tokens_file(tmp_path):
    """A valid A -> B -> C chain."""
    path = tmp_path / "clean.json"
    path.write_text(json.dumps({
        "tokens": [
            {"id": "A", "displayName": "A", "resolvedValueTypeId": "color",
             "valuesByMode": [{"modeIds": [], "value": {"tokenId": "B"}}]},
            {"id": "B", "displayName": "B", "resolvedValueTypeId": "color",
             "valuesByMode": [{"modeIds": [], "value": {"tokenId": "C"}}]},
            {"id": "C", "displayName": "C", "resolvedValueTypeId": "color",
             "valuesByMode": [{"modeIds": [], "value": {"value": "#FFFFFF"}}]},
        ]
    }))
    return str(path)
