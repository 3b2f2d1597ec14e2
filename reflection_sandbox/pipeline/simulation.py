"""
Simulation pipeline for the reflection sandbox.

Runs the engine stages in order for one room configuration:
build the virtual room tree, validate it, and project the real object into
every virtual room. The result exposes sight line tracing and path folding
on demand, plus the order filters the presentation layer steps through.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import ConfigurationError, SandboxError
from ..layout.projection import ObjectProjector
from ..layout.room_tree import ExpansionOrder, MAX_PRACTICAL_ORDER, RoomTree, RoomTreeBuilder
from ..layout.room_types import PlacedObject, Point, Room, WallConfig
from ..tracing.folding import PathFolder
from ..tracing.ray_path import RayPath, SightLineTracer
from ..validation import ValidationResult, validate_room_tree

logger = logging.getLogger(__name__)

REAL_OBJECT_ID = "object"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SimulationStage(Enum):
    BUILD_TREE = "build_tree"
    VALIDATE_TREE = "validate_tree"
    PROJECT_OBJECTS = "project_objects"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Settings / Result dataclasses
# ---------------------------------------------------------------------------

def _default_walls() -> WallConfig:
    return WallConfig(top=True, right=True, bottom=False, left=True)


def _parse_point(value: Any, name: str) -> Optional[Point]:
    """Accept (x, y), {"x", "y"} or {"position": {"x", "y"}}."""
    if value is None:
        return None
    if isinstance(value, dict):
        if 'position' in value:
            return _parse_point(value['position'], name)
        try:
            return (float(value['x']), float(value['y']))
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid {name} position {value!r}") from e
    try:
        x, y = value
        return (float(x), float(y))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {name} position {value!r}") from e


@dataclass
class SimulationSettings:
    # Room
    width: int = 4
    height: int = 4
    walls: WallConfig = field(default_factory=_default_walls)

    # Lattice
    reflection_order: int = 3
    expansion: ExpansionOrder = ExpansionOrder.BREADTH

    # Grid-local positions in the real room; observer defaults to the
    # bottom row, centred
    object_position: Optional[Point] = (1.0, 1.0)
    observer_position: Optional[Point] = None

    # Raise ValidationError instead of logging tree issues
    fail_fast: bool = False

    @property
    def observer(self) -> Point:
        if self.observer_position is not None:
            return self.observer_position
        return (float(self.width // 2), float(self.height - 1))

    def validate(self):
        """Check the settings.

        Raises:
            ConfigurationError: Listing every invalid field
        """
        errors = []
        if self.width < 1 or self.height < 1:
            errors.append(f"Room size must be positive, got {self.width}x{self.height}")
        if self.reflection_order < 0:
            errors.append(f"Reflection order must be >= 0, got {self.reflection_order}")
        for name, position in (('object', self.object_position), ('observer', self.observer_position)):
            if position is None:
                continue
            x, y = position
            if not (0 <= x < self.width and 0 <= y < self.height):
                errors.append(f"{name.capitalize()} position ({x}, {y}) is outside the room")
        if errors:
            raise ConfigurationError(f"Invalid settings: {'; '.join(errors)}")

        if self.reflection_order > MAX_PRACTICAL_ORDER:
            logger.warning("Reflection order %d is above the practical range (1-%d)",
                           self.reflection_order, MAX_PRACTICAL_ORDER)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationSettings':
        """Create from the presentation layer's configuration.

        Accepts both {"room": {width, height, mirroredWalls}, ...} and the
        flat {width, height, mirroredWalls, ...} layout, plus
        reflectionOrder, object and observer.
        """
        room = data.get('room', data)
        kwargs: Dict[str, Any] = {}
        try:
            if 'width' in room:
                kwargs['width'] = int(room['width'])
            if 'height' in room:
                kwargs['height'] = int(room['height'])
            if 'reflectionOrder' in data:
                kwargs['reflection_order'] = int(data['reflectionOrder'])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid room configuration: {e}") from e

        walls = room.get('mirroredWalls')
        if walls is not None:
            if not isinstance(walls, dict):
                raise ConfigurationError(f"mirroredWalls must be a mapping, got {walls!r}")
            kwargs['walls'] = WallConfig.from_dict(walls)

        if 'expansion' in data:
            try:
                kwargs['expansion'] = ExpansionOrder(data['expansion'])
            except ValueError as e:
                raise ConfigurationError(f"Unknown expansion order {data['expansion']!r}") from e

        if 'object' in data:
            kwargs['object_position'] = _parse_point(data['object'], 'object')
        if 'observer' in data:
            kwargs['observer_position'] = _parse_point(data['observer'], 'observer')
        if 'failFast' in data:
            kwargs['fail_fast'] = bool(data['failFast'])

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        def point(p):
            return {'x': p[0], 'y': p[1]} if p is not None else None

        return {
            'room': {
                'width': self.width,
                'height': self.height,
                'mirroredWalls': self.walls.to_dict(),
            },
            'reflectionOrder': self.reflection_order,
            'expansion': self.expansion.value,
            'object': {'position': point(self.object_position)} if self.object_position else None,
            'observer': {'position': point(self.observer)},
            'failFast': self.fail_fast,
        }


@dataclass
class SimulationResult:
    settings: SimulationSettings
    rooms: List[Room] = field(default_factory=list)
    real_objects: List[PlacedObject] = field(default_factory=list)
    virtual_objects: List[PlacedObject] = field(default_factory=list)
    validation: Optional[ValidationResult] = None
    stages_completed: List[SimulationStage] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self._tree: Optional[RoomTree] = None
        self._tracer: Optional[SightLineTracer] = None

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def tree(self) -> RoomTree:
        if self._tree is None:
            self._tree = RoomTree(self.rooms)
        return self._tree

    @property
    def root(self) -> Room:
        return self.tree.root

    @property
    def tracer(self) -> SightLineTracer:
        if self._tracer is None:
            self._tracer = SightLineTracer(self.rooms, self.settings.observer)
        return self._tracer

    def add_error(self, error: str, stage: Optional[SimulationStage] = None):
        if stage:
            error = f"[{stage.value}] {error}"
        self.errors.append(error)

    def add_warning(self, warning: str, stage: Optional[SimulationStage] = None):
        if stage:
            warning = f"[{stage.value}] {warning}"
        self.warnings.append(warning)

    # -- queries --

    def rooms_up_to(self, order: int) -> List[Room]:
        return self.tree.rooms_up_to(order)

    def virtual_objects_up_to(self, order: int) -> List[PlacedObject]:
        """Virtual objects whose room has reflection order <= order."""
        allowed = {room.id for room in self.rooms_up_to(order)}
        return [obj for obj in self.virtual_objects if obj.room_id in allowed]

    def get_virtual_object(self, virtual_object_id: str) -> Optional[PlacedObject]:
        for obj in self.virtual_objects:
            if obj.id == virtual_object_id:
                return obj
        return None

    def trace(self, virtual_object_id: str) -> Optional[RayPath]:
        """Trace the sight line of one virtual object, None if it is unknown."""
        obj = self.get_virtual_object(virtual_object_id)
        if obj is None:
            logger.warning("Unknown virtual object %s", virtual_object_id)
            return None
        return self.tracer.trace(obj)

    def trace_all(self, max_order: Optional[int] = None) -> List[RayPath]:
        """Visible sight lines of every virtual object (optionally up to an order)."""
        objects = self.virtual_objects if max_order is None else self.virtual_objects_up_to(max_order)
        return self.tracer.trace_all(objects, visible_only=True)

    def folder(self, ray_path: RayPath) -> PathFolder:
        return PathFolder(ray_path, self.tree)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the presentation layer."""
        return {
            'success': self.success,
            'settings': self.settings.to_dict(),
            'rooms': [room.to_dict() for room in self.rooms],
            'real_objects': [obj.to_dict() for obj in self.real_objects],
            'virtual_objects': [obj.to_dict() for obj in self.virtual_objects],
            'validation': self.validation.to_dict() if self.validation else None,
            'stages_completed': [stage.value for stage in self.stages_completed],
            'errors': list(self.errors),
            'warnings': list(self.warnings),
            'metrics': dict(self.metrics),
        }


# ---------------------------------------------------------------------------
# Main pipeline
# ---------------------------------------------------------------------------

class SimulationPipeline:
    """Builds the lattice and virtual objects for one room configuration."""

    def __init__(self, settings: Optional[SimulationSettings] = None):
        self.settings = settings or SimulationSettings()
        self.settings.validate()
        self.current_stage = SimulationStage.BUILD_TREE
        self.builder = RoomTreeBuilder(self.settings.expansion)

    def _build_tree(self, result: SimulationResult):
        self.current_stage = SimulationStage.BUILD_TREE
        root = Room.create_root(self.settings.width, self.settings.height, self.settings.walls)
        result.rooms = self.builder.build(root, self.settings.reflection_order)
        result.metrics['room_count'] = len(result.rooms)
        result.metrics['evictions'] = self.builder.eviction_count

    def _validate_tree(self, result: SimulationResult):
        self.current_stage = SimulationStage.VALIDATE_TREE
        result.validation = validate_room_tree(
            result.rooms, self.settings.reflection_order, fail_fast=self.settings.fail_fast,
        )
        for issue in result.validation.issues:
            result.add_warning(issue.format(), self.current_stage)

    def _project_objects(self, result: SimulationResult):
        self.current_stage = SimulationStage.PROJECT_OBJECTS
        if self.settings.object_position is None:
            logger.info("No object placed, skipping projection")
            return

        real = PlacedObject(id=REAL_OBJECT_ID, position=self.settings.object_position)
        result.real_objects = [real]
        projector = ObjectProjector(result.rooms)
        result.virtual_objects = projector.project(result.real_objects)
        for room_id in projector.skipped_rooms:
            result.add_warning(f"No virtual object in {room_id} (broken ancestry)", self.current_stage)
        logger.info("Placed %d virtual objects", len(result.virtual_objects))

    def run(self) -> SimulationResult:
        """Run every stage.

        Raises:
            ValidationError: If fail_fast is set and the tree is invalid
        """
        result = SimulationResult(settings=self.settings)
        start_time = time.time()
        logger.info("Starting simulation: %dx%d room, mirrors %s, order %d",
                    self.settings.width, self.settings.height,
                    [w.value for w in self.settings.walls.mirrored()],
                    self.settings.reflection_order)

        stages = [
            (self._build_tree, "Build room tree"),
            (self._validate_tree, "Validate room tree"),
            (self._project_objects, "Project objects"),
        ]
        for stage_fn, desc in stages:
            logger.debug("Stage: %s", desc)
            try:
                stage_fn(result)
            except ValueError as e:
                result.add_error(str(e), self.current_stage)
                return result
            except SandboxError as e:
                if self.settings.fail_fast:
                    raise
                result.add_error(str(e), self.current_stage)
                return result
            result.stages_completed.append(self.current_stage)

        result.stages_completed.append(SimulationStage.COMPLETE)
        result.metrics['total_time'] = time.time() - start_time
        logger.info("Simulation complete in %.3fs", result.metrics['total_time'])
        return result


def run_simulation(settings: Optional[SimulationSettings] = None) -> SimulationResult:
    """Run the simulation pipeline with the given (or default) settings."""
    return SimulationPipeline(settings).run()
