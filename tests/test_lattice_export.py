# Standard library imports
import json

# Reflection sandbox imports
from reflection_sandbox.debug import export_lattice_ascii, export_tree_dot, export_tree_json
from reflection_sandbox.layout.room_tree import build_room_tree


class TestAsciiExport:
    def test_first_order_lattice(self, first_order_rooms):
        """Each cell shows its room's reflection order"""
        assert export_lattice_ascii(first_order_rooms) == ".1.\n101"

    def test_custom_empty_char(self, first_order_rooms):
        assert export_lattice_ascii(first_order_rooms, empty=" ") == " 1 \n101"

    def test_mirror_box_diamond(self, mirror_box):
        """With every wall mirrored the order is the Manhattan distance"""
        rows = export_lattice_ascii(build_room_tree(mirror_box, 2)).split("\n")
        assert rows == ["..2..", ".212.", "21012", ".212.", "..2.."]

    def test_empty(self):
        assert export_lattice_ascii([]) == ""


class TestDotExport:
    def test_nodes_and_edges(self, first_order_rooms):
        """Rooms become nodes and reflections become labelled edges"""
        dot = export_tree_dot(first_order_rooms)
        assert dot.startswith("digraph RoomTree {")
        assert dot.endswith("}")
        assert '"original" [label=' in dot
        assert '"original" -> "original-top-1" [label="top"];' in dot
        assert dot.count("->") == 3


class TestJsonExport:
    def test_statistics(self, first_order_rooms):
        """JSON export carries counts per order"""
        data = json.loads(export_tree_json(first_order_rooms, max_order=1))
        assert data["metadata"]["max_order"] == 1
        assert data["statistics"]["room_count"] == 4
        assert data["statistics"]["rooms_by_order"] == {"0": 1, "1": 3}
        assert len(data["rooms"]) == 4
