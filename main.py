"""
main.py — Algorithm Visualizer Flask App
=========================================
The web server that powers the visualizer.

Routes:
  GET  /                 – main UI
  GET  /api/algorithms   – registry cards
  GET  /api/state        – tick the playback clock, return the current frame
  POST /api/config       – algorithm type / algorithm / sizes / speed / theme
  POST /api/generate     – new random array or grid
  POST /api/play         – run the algorithm and animate (or resume)
  POST /api/pause        – pause playback
  POST /api/step         – apply exactly one step
  POST /api/reset        – stop and start over on new data
  POST /api/grid/cell    – {x, y, action: wall|start|end}
  GET  /api/log          – the loaded step log, serialised

State management:
  Each browser gets a VisualizerSession kept in process memory, keyed by
  an id stored in the Flask session cookie, next to the browser's
  preferences.  At most CONFIG.max_sessions are kept; the least recently
  used is dropped first and rebuilt from the stored preferences on the
  next request.  Access goes through one lock.  Playback runs on a
  PollingScheduler: nothing advances between requests, and every
  /api/state poll catches the clock up with real time.
"""

import secrets
import threading
from collections import OrderedDict
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, render_template_string, request, session

from algorithms import list_algorithms, get_algorithm, SORTING
from engine import PollingScheduler, VisualizerSession
from engine.session import GRID_HINT
from ui import (
    SvgRenderer,
    algorithm_card,
    algorithm_selector,
    customization_panel,
    legend,
    mode_toggle,
    playback_controls,
    render_bars,
    render_grid,
    stats_panel,
)
from utils import Preferences, get_logger, load_app_config

CONFIG = load_app_config()
logger = get_logger(__name__, CONFIG.log_file, CONFIG.log_level)

app = Flask(__name__)
app.secret_key = secrets.token_hex(32)

GRID_ACTIONS = ("wall", "start", "end")


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
# sid -> VisualizerSession, least recently used first
_SESSIONS: "OrderedDict[str, VisualizerSession]" = OrderedDict()
_LOCK = threading.Lock()


def get_visualizer() -> VisualizerSession:
    """
    The caller's VisualizerSession, created on first use from the
    preferences stored in the Flask session.  Hold _LOCK.
    """
    sid = session.get("sid")
    if sid is not None and sid in _SESSIONS:
        _SESSIONS.move_to_end(sid)
        return _SESSIONS[sid]

    sid = sid or secrets.token_hex(16)
    session["sid"] = sid
    prefs = Preferences.from_mapping(session.get("preferences"), defaults=CONFIG.preferences)
    vs = VisualizerSession(prefs, PollingScheduler(), SvgRenderer())
    _SESSIONS[sid] = vs
    logger.info(f"New visualizer session {sid[:8]}")
    _evict_idle_sessions()
    return vs


def save_preferences(vs: VisualizerSession) -> None:
    session["preferences"] = vs.preferences.to_storage()


def _evict_idle_sessions() -> None:
    while len(_SESSIONS) > CONFIG.max_sessions:
        sid, vs = _SESSIONS.popitem(last=False)
        vs.sorting.stop()
        vs.pathfinding.stop()
        logger.info(f"Evicted idle visualizer session {sid[:8]}")


def current_svg(vs: VisualizerSession) -> str:
    """Last animated frame while a log is loaded, else the idle view."""
    if vs.engine.log is not None and vs.renderer.frames:
        return vs.renderer.last_svg
    theme = vs.preferences.theme
    if vs.algorithm_type == SORTING:
        return render_bars(vs.array, message=vs.notice or "", theme=theme)
    return render_grid(
        vs.grid, message=vs.notice or GRID_HINT, theme=theme,
        algorithm=vs.preferences.pathfinding_algorithm,
    )


def state_payload(vs: VisualizerSession, **extra: Any) -> Dict[str, Any]:
    data = vs.snapshot()
    data["svg"] = current_svg(vs)
    data.update(extra)
    return data


def error(message: str, status: int, vs: Optional[VisualizerSession] = None) -> Tuple[Any, int]:
    body = state_payload(vs) if vs is not None else {}
    body["error"] = message
    return jsonify(body), status


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    with _LOCK:
        vs    = get_visualizer()
        prefs = vs.preferences
        snap  = vs.snapshot()
        html = render_template_string(
            INDEX_TEMPLATE,
            svg=current_svg(vs),
            theme=prefs.theme,
            mode_toggle=mode_toggle(prefs.dark_mode),
            algo_selector=algorithm_selector(
                list_algorithms(),
                algorithm_type=prefs.algorithm_type,
                selected_sorting=prefs.sorting_algorithm,
                selected_pathfinding=prefs.pathfinding_algorithm,
            ),
            customization=customization_panel(prefs.algorithm_type, prefs.array_size, prefs.grid_size),
            playback=playback_controls(snap["state"], snap["current_step"], snap["total_steps"], prefs.speed),
            stats=stats_panel(snap["stats"]),
            card=algorithm_card(get_algorithm(vs.algorithm)),
            legend=legend(prefs.algorithm_type, vs.algorithm),
        )
    return html


# ---------------------------------------------------------------------------
# API: Read
# ---------------------------------------------------------------------------
@app.route("/api/algorithms")
def api_algorithms():
    return jsonify({"algorithms": [a.to_dict() for a in list_algorithms()]})


@app.route("/api/state")
def api_state():
    with _LOCK:
        vs = get_visualizer()
        vs.scheduler.tick()
        return jsonify(state_payload(vs))


@app.route("/api/log")
def api_log():
    with _LOCK:
        vs  = get_visualizer()
        log = vs.engine.log
        return jsonify({"log": log.to_dict() if log is not None else None})


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config", methods=["POST"])
def api_config():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error("Expected a JSON object", 400)

    rejected = []
    with _LOCK:
        vs = get_visualizer()
        if "algorithm_type" in data and not vs.select_type(data["algorithm_type"]):
            rejected.append("algorithm_type")
        if "algorithm" in data and not vs.select_algorithm(data["algorithm"]):
            rejected.append("algorithm")
        if "array_size" in data and not vs.set_array_size(data["array_size"]):
            rejected.append("array_size")
        if "grid_size" in data and not vs.set_grid_size(data["grid_size"]):
            rejected.append("grid_size")
        if "speed" in data and not vs.set_speed(data["speed"]):
            rejected.append("speed")
        if "dark_mode" in data:
            if not isinstance(data["dark_mode"], bool):
                rejected.append("dark_mode")
            elif data["dark_mode"] != vs.preferences.dark_mode:
                vs.renderer.redraw(vs.toggle_theme())

        save_preferences(vs)
        if rejected:
            return error(f"Invalid value for: {', '.join(rejected)}", 400, vs)
        return jsonify(state_payload(vs))


# ---------------------------------------------------------------------------
# API: Playback
# ---------------------------------------------------------------------------
@app.route("/api/generate", methods=["POST"])
def api_generate():
    with _LOCK:
        vs = get_visualizer()
        vs.generate_data()
        return jsonify(state_payload(vs))


@app.route("/api/play", methods=["POST"])
def api_play():
    with _LOCK:
        vs = get_visualizer()
        ok = vs.play()
        return jsonify(state_payload(vs, ok=ok))


@app.route("/api/pause", methods=["POST"])
def api_pause():
    with _LOCK:
        vs = get_visualizer()
        vs.scheduler.tick()
        ok = vs.pause()
        return jsonify(state_payload(vs, ok=ok))


@app.route("/api/step", methods=["POST"])
def api_step():
    with _LOCK:
        vs = get_visualizer()
        ok = vs.step()
        return jsonify(state_payload(vs, ok=ok))


@app.route("/api/reset", methods=["POST"])
def api_reset():
    with _LOCK:
        vs = get_visualizer()
        vs.reset()
        return jsonify(state_payload(vs))


# ---------------------------------------------------------------------------
# API: Grid Editing
# ---------------------------------------------------------------------------
@app.route("/api/grid/cell", methods=["POST"])
def api_grid_cell():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error("Expected a JSON object", 400)

    x, y   = _int_or_none(data.get("x")), _int_or_none(data.get("y"))
    action = data.get("action", "wall")
    if x is None or y is None or action not in GRID_ACTIONS:
        return error("Expected integer x, y and action in wall|start|end", 400)

    with _LOCK:
        vs = get_visualizer()
        if not vs.grid.in_bounds(x, y):
            return error(f"Cell ({x},{y}) is outside the grid", 400, vs)
        edit = {"wall": vs.toggle_wall, "start": vs.set_start, "end": vs.set_end}[action]
        if not edit(x, y):
            return error("The grid cannot be edited while an animation is running", 409, vs)
        return jsonify(state_payload(vs))


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return None
    try:
        return int(value)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Algorithm Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg: #f8fafc;
      --bg-panel: #ffffff;
      --border: #e2e8f0;
      --text-primary: #0f172a;
      --text-secondary: #64748b;
      --accent: #4361ee;
    }

    body.dark-mode {
      --bg: #0f172a;
      --bg-panel: #1e293b;
      --border: #334155;
      --text-primary: #f8fafc;
      --text-secondary: #94a3b8;
    }

    body {
      font-family: system-ui, -apple-system, sans-serif;
      background: var(--bg);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    #sidebar {
      width: 320px;
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 20px 16px;
    }

    #main {
      flex: 1;
      display: flex;
      flex-direction: column;
      padding: 20px;
      gap: 16px;
    }

    #canvas-svg {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
    }

    #canvas-svg svg { max-width: 100%; max-height: 100%; border-radius: 12px; }

    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 16px;
      margin-bottom: 14px;
    }

    .panel h3 {
      font-size: 13px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
      margin-bottom: 12px;
    }

    .button-row { display: flex; gap: 8px; margin-bottom: 10px; flex-wrap: wrap; }

    button {
      background: var(--accent);
      color: #fff;
      border: none;
      padding: 8px 14px;
      border-radius: 8px;
      cursor: pointer;
      font-weight: 600;
    }

    button:disabled { opacity: 0.4; cursor: default; }
    .btn-secondary { background: var(--text-secondary); }
    .mode-toggle { background: transparent; font-size: 20px; float: right; }

    select, input[type="range"] { width: 100%; margin: 6px 0; }
    label { display: block; font-size: 12px; color: var(--text-secondary); margin-top: 8px; }
    .hint { font-size: 11px; color: var(--text-secondary); margin-top: 8px; font-style: italic; }
    .complexity { font-family: monospace; font-size: 12px; margin-bottom: 8px; color: var(--accent); }
    .stat-value { font-weight: 700; }

    .legend { display: flex; gap: 16px; flex-wrap: wrap; font-size: 12px; }
    .legend-item { display: flex; align-items: center; gap: 6px; }
    .legend-color { width: 14px; height: 14px; border-radius: 3px; }

    #notice { color: #f43f5e; font-weight: 600; min-height: 1em; }
  </style>
</head>
<body class="{{ 'dark-mode' if theme == 'dark' else '' }}">
  <div id="sidebar">
    {{ mode_toggle|safe }}
    {{ algo_selector|safe }}
    {{ customization|safe }}
    <div id="playback">{{ playback|safe }}</div>
    <div id="stats">{{ stats|safe }}</div>
  </div>

  <div id="main">
    <div id="card">{{ card|safe }}</div>
    <div id="notice"></div>
    <div id="canvas-svg">{{ svg|safe }}</div>
    {{ legend|safe }}
  </div>

  <script>
    const STAT_LABELS = {
      comparisons: 'Comparisons', swaps: 'Swaps',
      visited_nodes: 'Visited Nodes', path_length: 'Path Length',
    };
    let polling = null;

    async function post(url, body) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(body || {}),
      });
      return res.json();
    }

    function apply(data) {
      if (data.svg) document.getElementById('canvas-svg').innerHTML = data.svg;
      document.getElementById('notice').textContent = data.notice || data.error || '';
      if (data.stats) {
        document.getElementById('stats').innerHTML =
          '<div class="panel stats"><h3>📊 Stats</h3>' +
          Object.entries(data.stats).map(([k, v]) =>
            `<div class="stat-item">${STAT_LABELS[k] || k}: <span class="stat-value">${v}</span></div>`
          ).join('') + '</div>';
      }
      const playing = data.state === 'playing';
      document.getElementById('btn-play').disabled = playing;
      document.getElementById('btn-pause').disabled = !playing;
      document.getElementById('btn-step').disabled = playing;
      document.getElementById('current-step').textContent = data.current_step ?? 0;
      document.getElementById('total-steps').textContent = data.total_steps ?? 0;
      if (data.speed) document.getElementById('speed-value').textContent = data.speed.label;
      document.body.classList.toggle('dark-mode', data.theme === 'dark');

      if (playing && !polling) {
        polling = setInterval(async () => {
          apply(await (await fetch('/api/state')).json());
        }, 50);
      } else if (!playing && polling) {
        clearInterval(polling);
        polling = null;
      }
    }

    async function configure(body) {
      apply(await post('/api/config', body));
    }

    document.getElementById('btn-play').addEventListener('click', async () => apply(await post('/api/play')));
    document.getElementById('btn-pause').addEventListener('click', async () => apply(await post('/api/pause')));
    document.getElementById('btn-step').addEventListener('click', async () => apply(await post('/api/step')));
    document.getElementById('btn-reset').addEventListener('click', async () => apply(await post('/api/reset')));
    document.getElementById('btn-generate')?.addEventListener('click', async () => apply(await post('/api/generate')));

    // type / size changes re-layout the sidebar, so reload
    document.getElementById('algorithm-type').addEventListener('change', async (e) => {
      await configure({algorithm_type: e.target.value});
      location.reload();
    });
    for (const id of ['sorting-algorithm', 'pathfinding-algorithm']) {
      document.getElementById(id).addEventListener('change', async (e) => {
        await configure({algorithm: e.target.value});
        location.reload();
      });
    }
    document.getElementById('array-size')?.addEventListener('change', (e) => configure({array_size: +e.target.value}));
    document.getElementById('grid-size')?.addEventListener('change', (e) => configure({grid_size: +e.target.value}));
    document.getElementById('speed').addEventListener('input', (e) => configure({speed: +e.target.value}));
    document.getElementById('mode-toggle').addEventListener('click', () =>
      configure({dark_mode: !document.body.classList.contains('dark-mode')}));

    // grid editing: click = wall, shift+click = start, ctrl+click = end
    document.getElementById('canvas-svg').addEventListener('click', async (e) => {
      const cell = e.target.closest('[data-x]');
      if (!cell) return;
      const action = e.shiftKey ? 'start' : (e.ctrlKey ? 'end' : 'wall');
      apply(await post('/api/grid/cell', {x: +cell.dataset.x, y: +cell.dataset.y, action}));
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logger.info(f"Algorithm Visualizer on http://{CONFIG.host}:{CONFIG.port}")
    app.run(host=CONFIG.host, port=CONFIG.port, debug=CONFIG.debug)
