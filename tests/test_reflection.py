# Reflection sandbox imports
from reflection_sandbox.geometry.reflection import reflect_cell, reflect_point, reflect_wall_config
from reflection_sandbox.layout.room_types import GridPos, Room, Wall, WallConfig

# Third-party imports
import pytest


ALL_WALLS = [Wall.TOP, Wall.RIGHT, Wall.BOTTOM, Wall.LEFT]


class TestWall:
    def test_opposite(self):
        """Opposite walls pair up"""
        assert Wall.TOP.opposite() is Wall.BOTTOM
        assert Wall.LEFT.opposite() is Wall.RIGHT
        assert all(wall.opposite().opposite() is wall for wall in ALL_WALLS)

    def test_parse_accepts_strings_and_members(self):
        """Tags parse case-insensitively"""
        assert Wall.parse("top") is Wall.TOP
        assert Wall.parse("LEFT") is Wall.LEFT
        assert Wall.parse(Wall.RIGHT) is Wall.RIGHT

    def test_parse_unknown_tag(self):
        """Unknown tags parse to None"""
        assert Wall.parse("diagonal") is None
        assert Wall.parse(None) is None

    def test_neighbor_steps(self):
        """y grows downward, so TOP is y - 1"""
        origin = GridPos(0, 0)
        assert origin.neighbor(Wall.TOP) == GridPos(0, -1)
        assert origin.neighbor(Wall.RIGHT) == GridPos(1, 0)
        assert origin.neighbor(Wall.BOTTOM) == GridPos(0, 1)
        assert origin.neighbor(Wall.LEFT) == GridPos(-1, 0)

    def test_wall_towards(self):
        """wall_towards inverts neighbor and rejects non-adjacent cells"""
        origin = GridPos(2, 3)
        for wall in ALL_WALLS:
            assert origin.wall_towards(origin.neighbor(wall)) is wall
        assert origin.wall_towards(GridPos(3, 4)) is None
        assert origin.wall_towards(origin) is None


class TestRoomGeometry:
    def test_bounds_follow_position(self):
        """A room at (px, py) covers [px*w, (px+1)*w] x [py*h, (py+1)*h]"""
        room = Room(id="r", width=4, height=3, walls=WallConfig(), position=GridPos(-1, 2))
        assert room.bounds == (-4.0, 6.0, 0.0, 9.0)

    def test_cell_center_round_trip(self):
        """cell_center and to_local are inverse"""
        room = Room(id="r", width=4, height=4, walls=WallConfig(), position=GridPos(1, -1))
        center = room.cell_center((2, 3))
        assert center == (6.5, -0.5)
        assert room.to_local(center) == (2.0, 3.0)

    def test_contains_point_includes_boundary(self):
        """Points on the boundary are inside"""
        room = Room.create_root(4, 4, WallConfig())
        assert room.contains_point((4.0, 0.0))
        assert not room.contains_point((4.01, 2.0))
        assert room.contains_point((4.01, 2.0), tolerance=0.1)


class TestReflectPoint:
    @pytest.mark.parametrize(
        "wall, expected",
        [
            (Wall.TOP, (1.5, -1.5)),
            (Wall.BOTTOM, (1.5, 6.5)),
            (Wall.RIGHT, (6.5, 1.5)),
            (Wall.LEFT, (-1.5, 1.5)),
        ],
    )
    def test_each_wall(self, wall, expected):
        """Each wall mirrors one coordinate about its line"""
        assert reflect_point((1.5, 1.5), wall, (0.0, 0.0), (4, 4)) == expected

    def test_offset_room(self):
        """Wall lines come from the room's origin"""
        assert reflect_point((5.0, 1.0), Wall.RIGHT, (4.0, 0.0), (4, 4)) == (11.0, 1.0)
        assert reflect_point((5.0, -3.0), Wall.TOP, (4.0, -4.0), (4, 4)) == (5.0, -5.0)

    @pytest.mark.parametrize("wall", ALL_WALLS)
    @pytest.mark.parametrize("point", [(0.3, 0.7), (3.9, 2.2), (-5.5, 11.25)])
    def test_involution(self, wall, point):
        """Reflecting twice returns the original point"""
        origin, size = (4.0, -8.0), (4, 4)
        once = reflect_point(point, wall, origin, size)
        assert reflect_point(once, wall, origin, size) == pytest.approx(point)

    def test_string_tag(self):
        """Wall tags may be given as strings"""
        assert reflect_point((1.0, 1.0), "left", (0.0, 0.0), (4, 4)) == (-1.0, 1.0)

    def test_invalid_tag_returns_input(self, caplog):
        """Unknown tags leave the point unchanged and log a warning"""
        assert reflect_point((1.0, 2.0), "diagonal", (0.0, 0.0), (4, 4)) == (1.0, 2.0)
        assert "Invalid wall tag" in caplog.text


class TestReflectWallConfig:
    def test_horizontal_swap(self, default_walls):
        """Reflecting across TOP swaps top and bottom"""
        mirrored = reflect_wall_config(default_walls, Wall.TOP)
        assert mirrored == WallConfig(top=False, right=True, bottom=True, left=True)

    def test_vertical_swap(self):
        """Reflecting across LEFT swaps left and right"""
        walls = WallConfig(top=True, right=True)
        assert reflect_wall_config(walls, Wall.LEFT) == WallConfig(top=True, left=True)

    @pytest.mark.parametrize("wall", ALL_WALLS)
    def test_involution(self, wall):
        """Reflecting a configuration twice restores it"""
        walls = WallConfig(top=True, right=False, bottom=False, left=True)
        assert reflect_wall_config(reflect_wall_config(walls, wall), wall) == walls

    def test_invalid_tag_returns_input(self, default_walls, caplog):
        """Unknown tags leave the configuration unchanged"""
        assert reflect_wall_config(default_walls, "up") is default_walls
        assert "Invalid wall tag" in caplog.text


class TestReflectCell:
    def test_top_in_4x4_room(self):
        """(1, 1) reflected across TOP in a 4x4 room lands on (1, 2)"""
        assert reflect_cell((1, 1), Wall.TOP, (4, 4)) == (1.0, 2.0)

    @pytest.mark.parametrize("x", range(4))
    @pytest.mark.parametrize("y", range(3))
    def test_matches_index_flip(self, x, y):
        """Cell reflection is x' = W - x - 1 or y' = H - y - 1"""
        size = (4, 3)
        assert reflect_cell((x, y), Wall.LEFT, size) == (3 - x, y)
        assert reflect_cell((x, y), Wall.RIGHT, size) == (3 - x, y)
        assert reflect_cell((x, y), Wall.TOP, size) == (x, 2 - y)
        assert reflect_cell((x, y), Wall.BOTTOM, size) == (x, 2 - y)

    def test_invalid_tag_returns_input(self):
        """Unknown tags leave the cell unchanged"""
        assert reflect_cell((1, 2), "nowhere", (4, 4)) == (1, 2)
