from __future__ import annotations

import logging

from esper import World

from tilecascade.components.game_state import GameMode
from tilecascade.components.life import Life
from tilecascade.events.bus import (
    EventBus,
    EVENT_GAME_MODE_CHANGED,
    EVENT_GAME_OVER,
    EVENT_GAME_RESET,
    EVENT_LIFE_ACTIVATED,
    EVENT_LIFE_CHANGED,
    EVENT_MATCH_CLEARED,
    EVENT_MOVE_REJECTED,
    EVENT_TICK,
    EVENT_VISIBILITY_CHANGED,
)
from tilecascade.utils.resources import get_game_state, get_life, get_rules
from tilecascade.utils.scheduler import TaskScheduler

logger = logging.getLogger(__name__)

_DECAY_TASK = "life_decay"
_GRACE_TASK = "life_game_over_grace"


class LifeSystem:
    """Endurance meter for life mode.

    The meter sleeps until the first cleared wave of the session, which fills
    it and starts the decay timer. Cleared clusters feed it, rejected swaps
    drain it. Reaching zero opens a short grace window; if nothing lifts the
    meter before it closes the session is lost.
    """

    def __init__(self, world: World, event_bus: EventBus, scheduler: TaskScheduler | None = None) -> None:
        self.world = world
        self.event_bus = event_bus
        self.scheduler = scheduler or TaskScheduler()
        self.rules = get_rules(world)
        life = self.life
        life.enabled = get_game_state(world).mode is GameMode.LIFE
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_MATCH_CLEARED, self.on_match_cleared)
        self.event_bus.subscribe(EVENT_MOVE_REJECTED, self.on_move_rejected)
        self.event_bus.subscribe(EVENT_GAME_MODE_CHANGED, self.on_game_mode_changed)
        self.event_bus.subscribe(EVENT_GAME_RESET, self.on_game_reset)
        self.event_bus.subscribe(EVENT_VISIBILITY_CHANGED, self.on_visibility_changed)

    @property
    def life(self) -> Life:
        return get_life(self.world)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_tick(self, sender, **payload) -> None:
        dt = payload.get("dt", 0.0)
        if dt and dt > 0:
            self.scheduler.advance(dt)

    def on_match_cleared(self, sender, **payload) -> None:
        life = self.life
        if not life.enabled:
            return
        if not life.active:
            self.start()
        gain = self.rules.life_gain_for_wave(list(payload.get("cluster_sizes") or []))
        if gain > 0:
            self.add_life(gain, reason="match")

    def on_move_rejected(self, sender, **payload) -> None:
        life = self.life
        if not payload.get("did_swap"):
            return
        if not (life.enabled and life.active):
            return
        self.add_life(-self.rules.no_match_penalty, reason="no_match")

    def on_game_mode_changed(self, sender, **payload) -> None:
        mode = payload.get("new_mode")
        self.teardown()
        self.life.enabled = mode is GameMode.LIFE

    def on_game_reset(self, sender, **payload) -> None:
        self.teardown()

    def on_visibility_changed(self, sender, **payload) -> None:
        if payload.get("hidden"):
            self.stop_decay()
        else:
            self.restart_decay()

    # ------------------------------------------------------------------
    # Meter
    # ------------------------------------------------------------------

    def start(self) -> None:
        life = self.life
        life.active = True
        self.set_life(life.max_value, reason="activated")
        logger.info("Life meter activated at %d", life.current)
        self.event_bus.emit(EVENT_LIFE_ACTIVATED, current=life.current)
        self.restart_decay()

    def set_life(self, value: int, *, reason: str = "set") -> int:
        life = self.life
        old = life.current
        life.current = value
        life.clamp()
        if life.current != old:
            self.event_bus.emit(
                EVENT_LIFE_CHANGED,
                current=life.current,
                max_value=life.max_value,
                delta=life.current - old,
                reason=reason,
            )
        if life.current <= 0:
            if life.enabled and not self.scheduler.is_armed(_GRACE_TASK):
                self.scheduler.arm(_GRACE_TASK, self.rules.game_over_grace, self._on_grace_expired)
        else:
            self.scheduler.cancel(_GRACE_TASK)
        return life.current

    def add_life(self, delta: int, *, reason: str = "delta") -> int:
        # Gains and penalties leave the decay schedule untouched.
        return self.set_life(self.life.current + delta, reason=reason)

    def teardown(self) -> None:
        """Return the meter to its dormant state."""
        life = self.life
        self.stop_decay()
        self.scheduler.cancel(_GRACE_TASK)
        life.lost = False
        life.active = False
        self.set_life(life.max_value, reason="reset")

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def restart_decay(self) -> None:
        self.stop_decay()
        life = self.life
        if life.lost or not life.active:
            return
        self.scheduler.arm(_DECAY_TASK, self.rules.decay_interval, self._on_decay)

    def stop_decay(self) -> None:
        self.scheduler.cancel(_DECAY_TASK)

    def _on_decay(self) -> None:
        life = self.life
        if life.current > 0:
            self.set_life(life.current - self.rules.decay_step, reason="decay")
        if not life.lost and life.current > 0:
            self.restart_decay()

    def _on_grace_expired(self) -> None:
        life = self.life
        if life.current <= 0 and life.enabled and not life.lost:
            life.lost = True
            self.stop_decay()
            logger.info("Life depleted; game over")
            self.event_bus.emit(EVENT_GAME_OVER, reason="life_depleted")
