# Reflection sandbox imports
from reflection_sandbox.layout.room_tree import RoomTree, build_room_tree
from reflection_sandbox.layout.room_types import PlacedObject, Room, WallConfig

# Third-party imports
import pytest


# Test fixtures
@pytest.fixture
def default_walls():
    """Mirrors on top, right and left; plain bottom wall"""
    return WallConfig(top=True, right=True, bottom=False, left=True)


@pytest.fixture
def all_mirrors():
    """All four walls mirrored"""
    return WallConfig(top=True, right=True, bottom=True, left=True)


@pytest.fixture
def root_room(default_walls):
    """4x4 real room with the default mirrors"""
    return Room.create_root(4, 4, default_walls)


@pytest.fixture
def mirror_box(all_mirrors):
    """4x4 real room with every wall mirrored"""
    return Room.create_root(4, 4, all_mirrors)


@pytest.fixture
def first_order_rooms(root_room):
    """Root plus its three first-order images"""
    return build_room_tree(root_room, 1)


@pytest.fixture
def default_tree(root_room):
    """Default room expanded to order 3"""
    return RoomTree(build_room_tree(root_room, 3))


@pytest.fixture
def real_object():
    """Single real object at cell (1, 1)"""
    return PlacedObject(id="obj", position=(1.0, 1.0))
