"""
model/
------
Core data layer.  Public API:

    from model import Cell, Grid
    from model import generate_random_array
"""

from model.cell     import Cell, INF
from model.grid     import Grid, NEIGHBOUR_OFFSETS
from model.sequence import generate_random_array

__all__ = [
    "Cell",  "INF",
    "Grid",  "NEIGHBOUR_OFFSETS",
    "generate_random_array",
]
