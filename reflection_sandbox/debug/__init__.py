"""Debug export helpers."""

from .lattice_export import export_lattice_ascii, export_tree_dot, export_tree_json

__all__ = [
    'export_lattice_ascii',
    'export_tree_dot',
    'export_tree_json',
]
