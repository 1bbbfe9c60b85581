"""
canvas.py — SVG Renderer
=========================
Pure rendering functions: (array | Grid) + highlight + message → SVG.

    svg = render_bars([5, 3, 1], highlight=[0, 1], message="Comparing 5 and 3")
    svg = render_grid(grid, current=(2, 3), theme="dark")

SvgRenderer wraps both behind the engine's renderer interface and keeps
the most recent frame in `last_svg` for the web app to hand out.

Design decisions:
  - NO mutation.  Render functions read the data they are given and
    return a string.
  - Colours come from a per-theme palette dict; the caller picks the
    theme on every call, nothing is global.
  - Bar colour priority: highlighted > sorted > partition / merge depth
    > unsorted.  Cell colour priority: start > end > path > visited > wall.
"""

import math
from html import escape
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from model.grid import Grid


# ---------------------------------------------------------------------------
# Visual Config — palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    width:  int = 900
    height: int = 500

    # shared accents
    active:      str = "#f72585"   # pink: elements in play
    sorted:      str = "#4cc9f0"   # cyan: final position
    unsorted:    str = "#4361ee"   # royal blue
    partitioned: str = "#7209b7"   # purple: live quick-sort range
    merge_rgb:   Tuple[int, int, int] = (67, 97, 238)

    start:   str = "#4ade80"
    end:     str = "#f43f5e"
    path:    str = "#f59e0b"
    current: str = "#8b5cf6"
    visited_rgb: Tuple[int, int, int] = (76, 201, 240)
    max_shaded_distance: int = 30

    themes: Dict[str, Dict[str, str]] = {
        "light": {
            "bg":         "#ffffff",
            "text":       "#0f172a",
            "grid_line":  "rgba(0,0,0,0.05)",
            "empty_cell": "#f1f5f9",
            "wall":       "#334155",
            "cell_text":  "#1e293b",
        },
        "dark": {
            "bg":         "#1e293b",
            "text":       "#f8fafc",
            "grid_line":  "rgba(255,255,255,0.08)",
            "empty_cell": "#0f172a",
            "wall":       "#1e293b",
            "cell_text":  "#ffffff",
        },
    }

    font:            str = "system-ui, sans-serif"
    message_size:    int = 16
    message_band:    int = 50     # space above the bars / grid
    bottom_margin:   int = 20
    bar_label_min_w: int = 20     # bars narrower than this get no value label
    cell_label_min:  int = 20


CONFIG = CanvasConfig()


def palette(theme: str, config: CanvasConfig = CONFIG) -> Dict[str, str]:
    return config.themes.get(theme, config.themes["light"])


# ---------------------------------------------------------------------------
# Sorting view
# ---------------------------------------------------------------------------
def render_bars(
    array: Sequence[int],
    highlight: Iterable[int] = (),
    message: str = "",
    theme: str = "light",
    sorted_positions: Iterable[int] = (),
    partition_ranges: Iterable[Sequence[int]] = (),
    merge_ranges: Iterable[Sequence[int]] = (),
    config: CanvasConfig = CONFIG,
) -> str:
    colours = palette(theme, config)
    parts   = [_open_svg(colours, config)]
    parts.append(_message(message, colours, config))

    if array:
        hi        = set(highlight)
        done      = set(sorted_positions)
        parts_rng = [tuple(r) for r in partition_ranges]
        merge_rng = [tuple(r) for r in merge_ranges]

        bar_w  = config.width / len(array)
        usable = config.height - config.message_band - config.bottom_margin
        scale  = usable / max(max(array), 100)
        base_y = config.height - config.bottom_margin

        for i, value in enumerate(array):
            fill = _bar_colour(i, hi, done, parts_rng, merge_rng, config)
            h = value * scale
            x = i * bar_w
            w = max(1.0, bar_w - 1.5)
            parts.append(
                f'<rect class="bar" data-index="{i}" x="{x:.2f}" y="{base_y - h:.2f}" '
                f'width="{w:.2f}" height="{h:.2f}" rx="3" fill="{fill}"/>'
            )
            if bar_w > config.bar_label_min_w:
                parts.append(
                    f'<text x="{x + bar_w / 2:.2f}" y="{base_y - h - 5:.2f}" text-anchor="middle" '
                    f'font-size="10" font-weight="bold" font-family="{config.font}" '
                    f'fill="{colours["text"]}">{value}</text>'
                )

    parts.append("</svg>")
    return "\n".join(parts)


def _bar_colour(i, highlight, done, partition_ranges, merge_ranges, config: CanvasConfig) -> str:
    if i in highlight:
        return config.active
    if i in done:
        return config.sorted
    if partition_ranges:
        if any(lo <= i <= hi for lo, hi in partition_ranges):
            return config.partitioned
        return config.unsorted
    if merge_ranges:
        depths = [depth for start, end, depth in merge_ranges if start <= i <= end]
        if depths:
            alpha = 1 - min(0.8, max(depths) * 0.1)
            r, g, b = config.merge_rgb
            return f"rgba({r}, {g}, {b}, {alpha:.2f})"
    return config.unsorted


# ---------------------------------------------------------------------------
# Pathfinding view
# ---------------------------------------------------------------------------
def render_grid(
    grid: Grid,
    current: Optional[Tuple[int, int]] = None,
    message: str = "",
    theme: str = "light",
    algorithm: str = "",
    config: CanvasConfig = CONFIG,
) -> str:
    colours = palette(theme, config)
    parts   = [_open_svg(colours, config)]
    parts.append(_message(message, colours, config))

    size = min(
        (config.width - 40) // grid.width,
        (config.height - config.message_band - config.bottom_margin) // grid.height,
    )
    size     = max(1, size)
    offset_x = (config.width - size * grid.width) // 2
    offset_y = config.message_band - 10

    for cell in grid:
        x = offset_x + cell.x * size
        y = offset_y + cell.y * size
        fill = _cell_colour(cell, algorithm, colours, config)
        stroke = config.current if current == cell.pos else colours["grid_line"]
        width  = 3 if current == cell.pos else 1
        parts.append(
            f'<rect class="cell" data-x="{cell.x}" data-y="{cell.y}" x="{x}" y="{y}" '
            f'width="{size}" height="{size}" fill="{fill}" stroke="{stroke}" stroke-width="{width}"/>'
        )

        label = _cell_label(cell)
        if label and size > config.cell_label_min:
            parts.append(
                f'<text x="{x + size / 2:.1f}" y="{y + size / 2:.1f}" text-anchor="middle" '
                f'dominant-baseline="middle" font-size="{max(10, size // 3)}" '
                f'font-family="{config.font}" fill="{colours["cell_text"]}">{label}</text>'
            )

    parts.append("</svg>")
    return "\n".join(parts)


def _cell_colour(cell, algorithm: str, colours: Dict[str, str], config: CanvasConfig) -> str:
    if cell.is_start:
        return config.start
    if cell.is_end:
        return config.end
    if cell.is_path:
        return config.path
    if cell.is_visited:
        ratio = 0.0 if cell.distance == math.inf else min(1.0, cell.distance / config.max_shaded_distance)
        # DFS gets darker with depth, the others fade with distance
        alpha = 0.4 + (ratio if algorithm == "dfs" else 1 - ratio) * 0.6
        r, g, b = config.visited_rgb
        return f"rgba({r}, {g}, {b}, {alpha:.2f})"
    if cell.is_wall:
        return colours["wall"]
    return colours["empty_cell"]


def _cell_label(cell) -> str:
    if cell.is_start:
        return "S"
    if cell.is_end:
        return "E"
    if not cell.is_visited or cell.is_path or cell.is_wall:
        return ""
    value = cell.f if cell.f != math.inf else cell.distance
    if value == math.inf:
        return "∞"
    return str(int(value)) if float(value).is_integer() else str(value)


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------
def _open_svg(colours: Dict[str, str], config: CanvasConfig) -> str:
    return (
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg">\n'
        f'<rect width="{config.width}" height="{config.height}" fill="{colours["bg"]}"/>'
    )


def _message(message: str, colours: Dict[str, str], config: CanvasConfig) -> str:
    if not message:
        return ""
    return (
        f'<text class="message" x="{config.width / 2:.0f}" y="25" text-anchor="middle" '
        f'font-size="{config.message_size}" font-weight="bold" font-family="{config.font}" '
        f'fill="{colours["text"]}">{escape(message)}</text>'
    )


# ---------------------------------------------------------------------------
# Renderer for the playback engines
# ---------------------------------------------------------------------------
class SvgRenderer:
    """
    Engine-facing renderer.  Each render() call replaces `last_svg`;
    `frames` counts how many steps have been drawn.  redraw() repaints
    the last frame, e.g. after a theme change.
    """

    def __init__(self, config: CanvasConfig = CONFIG):
        self.config   = config
        self.last_svg: str = ""
        self.frames:   int = 0
        self._last_frame: Optional[Tuple[Any, Any, str, Dict[str, Any]]] = None

    def render(self, data: Any, highlight: Any, message: str, *, theme: str, context: Dict[str, Any]) -> str:
        self._last_frame = (data, highlight, message, context)
        self.frames += 1
        return self._draw(theme)

    def redraw(self, theme: str) -> str:
        if self._last_frame is None:
            return self.last_svg
        return self._draw(theme)

    def _draw(self, theme: str) -> str:
        data, highlight, message, context = self._last_frame
        if context.get("domain") == "pathfinding":
            svg = render_grid(
                data, current=highlight, message=message, theme=theme,
                algorithm=context.get("algorithm", ""), config=self.config,
            )
        else:
            svg = render_bars(
                data, highlight=highlight or (), message=message, theme=theme,
                sorted_positions=context.get("sorted_positions", ()),
                partition_ranges=context.get("partition_ranges", ()),
                merge_ranges=context.get("merge_ranges", ()),
                config=self.config,
            )
        self.last_svg = svg
        return svg
