from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float (seconds)
EVENT_VISIBILITY_CHANGED = "visibility_changed"    # payload: hidden=bool


# ============================================================================
# MOVES & GESTURES
# ============================================================================
EVENT_DRAG_START = "drag_start"                    # payload: row, col
EVENT_DRAG_ENTER = "drag_enter"                    # payload: row, col
EVENT_DRAG_END = "drag_end"                        # payload: None
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_MOVE_RESOLVED = "move_resolved"              # payload: match_count=int, path=list[(r,c)]
EVENT_MOVE_REJECTED = "move_rejected"              # payload: did_swap=bool, path=list[(r,c)]


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SWAP_DO = "tile_swap_do"                # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_FINALIZE = "tile_swap_finalize"    # payload: src=(r,c), dst=(r,c); observer hook, fired once the swap has landed
EVENT_MATCH_FOUND = "match_found"                  # payload: seeds=[(r,c),...], positions=[(r,c),...], depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], cluster_sizes=list[int], cluster_count=int, depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: plan=GravityPlan, survivors=list, spawns=list, depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, match_count=int, strategy=str, awards_score=bool
EVENT_BOARD_SEEDED = "board_seeded"                # payload: reason=str
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: reason=str, positions=list[(r,c)]


# ============================================================================
# SCORE & LIFE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: value=int, delta=int
EVENT_LIFE_ACTIVATED = "life_activated"            # payload: current=int
EVENT_LIFE_CHANGED = "life_changed"                # payload: current=int, max_value=int, delta=int, reason=str


# ============================================================================
# COLOR MODE
# ============================================================================
EVENT_ROUND_STARTED = "round_started"              # payload: goal_color=int, goal_label=str
EVENT_ROUND_WON = "round_won"                      # payload: goal_color=int, steps=int
EVENT_STEPS_CHANGED = "steps_changed"              # payload: steps=int
EVENT_STALEMATE_RESOLVED = "stalemate_resolved"    # payload: constructive=bool, solvable=bool


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_GAME_RESET = "game_reset"                    # payload: mode=GameMode
EVENT_GAME_OVER = "game_over"                      # payload: reason=str
