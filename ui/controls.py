"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • algorithm_selector   – type switch + per-type algorithm dropdown
  • customization_panel  – array size / grid size sliders
  • playback_controls    – play / pause / step / reset + speed slider
  • stats_panel          – comparisons & swaps, or visited & path length
  • algorithm_card       – title, complexity, description
  • legend               – colour key for the active view
  • mode_toggle          – light / dark switch

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from html import escape
from typing import Dict, List, Optional

from algorithms import PATHFINDING, SORTING, AlgoInfo
from engine.playback import SPEED_LEVELS, speed_level
from ui.canvas import CONFIG
from utils.config_loader import ARRAY_SIZE_RANGE, GRID_SIZE_RANGE


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(
    algorithms: List[AlgoInfo],
    algorithm_type: str = SORTING,
    selected_sorting: str = "bubble",
    selected_pathfinding: str = "dijkstra",
) -> str:
    def options(domain: str, selected: str) -> str:
        rows = []
        for algo in algorithms:
            if algo.domain != domain:
                continue
            sel = "selected" if algo.key == selected else ""
            rows.append(f'<option value="{algo.key}" {sel}>{escape(algo.label)}</option>')
        return "".join(rows)

    sorting_display     = "block" if algorithm_type == SORTING else "none"
    pathfinding_display = "none" if algorithm_type == SORTING else "block"

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algorithm-type">
        <option value="{SORTING}" {'selected' if algorithm_type == SORTING else ''}>Sorting</option>
        <option value="{PATHFINDING}" {'selected' if algorithm_type == PATHFINDING else ''}>Pathfinding</option>
      </select>
      <select id="sorting-algorithm" style="display: {sorting_display};">
        {options(SORTING, selected_sorting)}
      </select>
      <select id="pathfinding-algorithm" style="display: {pathfinding_display};">
        {options(PATHFINDING, selected_pathfinding)}
      </select>
    </div>
    """


# ---------------------------------------------------------------------------
# Customization
# ---------------------------------------------------------------------------
def customization_panel(algorithm_type: str = SORTING, array_size: int = 50, grid_size: int = 15) -> str:
    if algorithm_type == SORTING:
        lo, hi = ARRAY_SIZE_RANGE
        body = f"""
        <label>Array Size: <span id="array-size-value">{array_size}</span></label>
        <input type="range" id="array-size" min="{lo}" max="{hi}" value="{array_size}">
        """
    else:
        lo, hi = GRID_SIZE_RANGE
        body = f"""
        <label>Grid Size: <span id="grid-size-value">{grid_size} x {grid_size}</span></label>
        <input type="range" id="grid-size" min="{lo}" max="{hi}" value="{grid_size}">
        <p class="hint">Click to draw walls. Shift+Click sets start, Ctrl+Click sets end.</p>
        """
    return f"""
    <div class="panel customization">
      <h3>🎛 Customize</h3>
      {body}
      <button id="btn-generate" class="btn-secondary">Generate New Data</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    state: str = "stopped",
    current_step: int = 0,
    total_steps: int = 0,
    speed: int = 3,
) -> str:
    playing = state == "playing"
    label, _ = speed_level(speed)
    lo, hi = min(SPEED_LEVELS), max(SPEED_LEVELS)

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-play" class="btn-primary" {'disabled' if playing else ''}>▶ Play</button>
        <button id="btn-pause" {'' if playing else 'disabled'}>⏸ Pause</button>
        <button id="btn-step" {'disabled' if playing else ''}>⏭ Step</button>
        <button id="btn-reset" class="btn-secondary">↺ Reset</button>
      </div>
      <div class="step-info">
        Step <span id="current-step">{current_step}</span> / <span id="total-steps">{total_steps}</span>
      </div>
      <div class="speed-control">
        <label>Speed: <span id="speed-value">{label}</span></label>
        <input type="range" id="speed" min="{lo}" max="{hi}" value="{speed}">
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------
_STAT_LABELS = {
    "comparisons":   "Comparisons",
    "swaps":         "Swaps",
    "visited_nodes": "Visited Nodes",
    "path_length":   "Path Length",
}


def stats_panel(stats: Dict[str, int]) -> str:
    items = "".join(
        f'<div class="stat-item" data-stat="{key}">{_STAT_LABELS.get(key, key)}: '
        f'<span class="stat-value">{value}</span></div>'
        for key, value in stats.items()
    )
    return f"""
    <div class="panel stats">
      <h3>📊 Stats</h3>
      {items}
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Info Card
# ---------------------------------------------------------------------------
def algorithm_card(info: Optional[AlgoInfo]) -> str:
    if info is None:
        return '<div class="panel algorithm-card"><em>No algorithm selected.</em></div>'
    return f"""
    <div class="panel algorithm-card">
      <h3 id="algorithm-title">{escape(info.label)}</h3>
      <div id="complexity" class="complexity">{escape(info.complexity)}</div>
      <p id="description">{escape(info.description)}</p>
    </div>
    """


# ---------------------------------------------------------------------------
# Legend
# ---------------------------------------------------------------------------
def legend(algorithm_type: str = SORTING, algorithm: str = "") -> str:
    if algorithm_type == SORTING:
        entries = [("Active", CONFIG.active), ("Sorted", CONFIG.sorted), ("Unsorted", CONFIG.unsorted)]
        if algorithm == "quick":
            entries.append(("Partition", CONFIG.partitioned))
        elif algorithm == "merge":
            r, g, b = CONFIG.merge_rgb
            entries.append(("Subarray", f"rgba({r}, {g}, {b}, 0.5)"))
    else:
        r, g, b = CONFIG.visited_rgb
        entries = [
            ("Start",   CONFIG.start),
            ("End",     CONFIG.end),
            ("Wall",    CONFIG.themes["light"]["wall"]),
            ("Visited", f"rgb({r}, {g}, {b})"),
            ("Path",    CONFIG.path),
        ]

    items = "".join(
        f'<div class="legend-item"><div class="legend-color" style="background-color: {colour};"></div>{name}</div>'
        for name, colour in entries
    )
    return f'<div id="legend" class="legend">{items}</div>'


# ---------------------------------------------------------------------------
# Light / Dark
# ---------------------------------------------------------------------------
def mode_toggle(dark_mode: bool = False) -> str:
    icon = "☀️" if dark_mode else "🌙"
    return f'<button id="mode-toggle" class="mode-toggle" title="Toggle dark mode">{icon}</button>'
