"""
Simulation pipeline package.
"""

from .simulation import (
    SimulationSettings,
    SimulationResult,
    SimulationStage,
    SimulationPipeline,
    run_simulation,
)

__all__ = [
    'SimulationSettings',
    'SimulationResult',
    'SimulationStage',
    'SimulationPipeline',
    'run_simulation',
]
