"""
ui/
---
Presentation layer.

    from ui import SvgRenderer, render_bars, render_grid
    from ui import playback_controls, algorithm_selector, …
"""

from ui.canvas import CanvasConfig, SvgRenderer, render_bars, render_grid

from ui.controls import (
    algorithm_card,
    algorithm_selector,
    customization_panel,
    legend,
    mode_toggle,
    playback_controls,
    stats_panel,
)

__all__ = [
    "CanvasConfig",
    "SvgRenderer",
    "render_bars",
    "render_grid",
    "algorithm_card",
    "algorithm_selector",
    "customization_panel",
    "legend",
    "mode_toggle",
    "playback_controls",
    "stats_panel",
]
