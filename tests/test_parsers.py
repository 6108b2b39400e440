"""Tests for the graph state and item list parsers."""

import json
from pathlib import Path

import pytest

from tiergraph.engine.graph import RelationKind
from tiergraph.parser import GraphParseError, GraphStateParser, ItemListParser, LibraryItem

_SAMPLE_DIR = Path(__file__).parent / "sample_data"


class TestGraphStateParser:
    """Tests for GraphStateParser."""

    def setup_method(self):
        self.parser = GraphStateParser()

    def test_parse_sample_file(self):
        state = self.parser.parse_file(_SAMPLE_DIR / "tier_list.json")
        assert [e.label for e in state.nodes] == ["Gold", "Silver", "Platinum", "Bronze", "Copper"]
        assert len(state.connections) == 5
        assert state.connections[1].kind is RelationKind.GREATER_OR_EQUALS
        assert [e.label for e in state.library] == ["Tin"]

    def test_node_fields(self):
        state = self.parser.parse_data({
            "nodes": [{"id": 7, "label": "Gold", "color": "#fff", "imageUrl": "g.png", "x": 3, "y": 4}],
        })
        entity = state.nodes[0]
        assert entity.entity_id == "7"
        assert entity.image_url == "g.png"
        assert entity.attrs == {"x": 3, "y": 4}

    def test_empty_content(self):
        state = self.parser.parse("   \n")
        assert state.nodes == []
        assert state.connections == []
        assert len(state.snapshot()) == 0

    def test_missing_sections_default_to_empty(self):
        state = self.parser.parse('{"nodes": [{"id": "a"}]}')
        assert len(state.nodes) == 1
        assert state.connections == []
        assert state.library == []

    def test_symbol_relationships_accepted(self):
        state = self.parser.parse_data({
            "nodes": [{"id": "a"}, {"id": "b"}],
            "connections": [{"fromNodeId": "a", "toNodeId": "b", "relationship": "<="}],
        })
        assert state.connections[0].kind is RelationKind.LESS_OR_EQUALS
        assert state.connections[0].relation_id == ""

    def test_invalid_json(self):
        with pytest.raises(GraphParseError, match="Invalid JSON"):
            self.parser.parse("{nodes: ")

    def test_top_level_must_be_object(self):
        with pytest.raises(GraphParseError, match="JSON object"):
            self.parser.parse("[]")

    def test_section_must_be_list(self):
        with pytest.raises(GraphParseError, match="'nodes' must be a list"):
            self.parser.parse_data({"nodes": {"id": "a"}})

    def test_node_without_id(self):
        with pytest.raises(GraphParseError, match=r"nodes\[0\] is missing 'id'"):
            self.parser.parse_data({"nodes": [{"label": "Gold"}]})

    def test_connection_missing_field(self):
        with pytest.raises(GraphParseError, match="missing 'relationship'"):
            self.parser.parse_data({"connections": [{"fromNodeId": "a", "toNodeId": "b"}]})

    def test_unknown_relationship(self):
        with pytest.raises(GraphParseError, match=r"connections\[0\]"):
            self.parser.parse_data({
                "connections": [{"fromNodeId": "a", "toNodeId": "b", "relationship": "sideways"}],
            })

    def test_duplicate_node_ids(self):
        with pytest.raises(GraphParseError, match="Duplicate"):
            self.parser.parse_data({"nodes": [{"id": "a"}, {"id": "a"}]})

    def test_file_size_limit(self, tmp_path):
        path = tmp_path / "big.json"
        path.write_text(json.dumps({"nodes": [{"id": str(i)} for i in range(200)]}), encoding="utf-8")
        with pytest.raises(GraphParseError, match="limit"):
            GraphStateParser(max_bytes=100).parse_file(path)

    def test_parse_error_is_value_error(self):
        assert issubclass(GraphParseError, ValueError)


class TestItemListParser:
    """Tests for ItemListParser."""

    def setup_method(self):
        self.parser = ItemListParser()

    def test_text_lines(self):
        items = self.parser.parse_file(_SAMPLE_DIR / "items.txt")
        assert [item.label for item in items] == ["Apple", "Banana", "Cherry"]

    def test_json_strings(self):
        items = self.parser.parse('["Apple", "Banana"]', filename="fruit.json")
        assert items == [LibraryItem("Apple"), LibraryItem("Banana")]

    def test_json_objects(self):
        content = json.dumps([
            {"name": "Apple", "thumbnail": "apple.png"},
            {"text": "Banana", "label": "ignored"},
            {"image": "cherry.png"},
        ])
        items = self.parser.parse(content, filename="FRUIT.JSON")
        assert items[0] == LibraryItem("Apple", "apple.png")
        assert items[1] == LibraryItem("Banana")
        assert items[2].label == '{"image": "cherry.png"}'
        assert items[2].image_url == "cherry.png"

    def test_json_scalars(self):
        items = self.parser.parse("[1, 2.5, true]", filename="numbers.json")
        assert [item.label for item in items] == ["1", "2.5", "True"]

    def test_json_must_be_array(self):
        with pytest.raises(GraphParseError, match="array"):
            self.parser.parse('{"items": []}', filename="items.json")

    def test_json_invalid(self):
        with pytest.raises(GraphParseError, match="Invalid JSON"):
            self.parser.parse("[oops", filename="items.json")

    def test_non_json_file_is_text(self):
        items = self.parser.parse('["Apple"]', filename="items.txt")
        assert items == [LibraryItem('["Apple"]')]
