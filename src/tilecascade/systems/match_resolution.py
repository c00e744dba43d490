import logging
from typing import Dict

from esper import World

from tilecascade.components.game_state import GameMode
from tilecascade.events.bus import (EventBus, EVENT_MATCH_FOUND, EVENT_MATCH_CLEARED, EVENT_GRAVITY_APPLIED,
                                    EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE, EVENT_GAME_MODE_CHANGED)
from tilecascade.systems.board_ops import clear_clusters, expand_connected_same_color, format_board
from tilecascade.systems.gravity import compute_gravity_plan
from tilecascade.systems.strategies import ResolutionContext, ResolutionStrategy, strategy_for_mode
from tilecascade.utils.resources import (get_board, get_game_state, get_or_create_turn_state, get_palette,
                                         get_rng, get_rules)

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Runs the detect -> clear -> collapse -> refill loop after a move.

    Each wave is announced on the bus while the board is between states so
    observers can animate it: ``match_found`` and ``cascade_step`` before the
    clear, ``match_cleared`` after the logical clear (life gains hook here),
    ``gravity_applied`` once the collapsed and refilled board is committed.
    """

    def __init__(self, world: World, event_bus: EventBus,
                 strategies: Dict[GameMode, ResolutionStrategy] | None = None):
        self.world = world
        self.event_bus = event_bus
        self._overrides = strategies
        self.strategy: ResolutionStrategy = strategy_for_mode(get_game_state(world).mode, strategies)
        self.event_bus.subscribe(EVENT_GAME_MODE_CHANGED, self.on_game_mode_changed)

    def on_game_mode_changed(self, sender, **kwargs):
        mode = kwargs.get('new_mode')
        if mode is None:
            return
        self.strategy = strategy_for_mode(mode, self._overrides)

    def resolve(self, reason: str = "swap") -> int:
        """Resolve every match on the board; return the number of clusters cleared.

        Zero means nothing matched and the caller should revert its swap.
        """
        board = get_board(self.world)
        palette = get_palette(self.world)
        strategy = self.strategy
        ctx = ResolutionContext(
            world=self.world,
            event_bus=self.event_bus,
            board=board,
            rng=get_rng(self.world),
            rules=get_rules(self.world),
            palette_size=len(palette),
        )
        state = get_or_create_turn_state(self.world)
        state.action_source = reason
        state.cascade_active = True
        state.cascade_depth = 0
        match_count = 0
        try:
            while True:
                seeds = strategy.find_matches(ctx)
                if not seeds:
                    break
                state.cascade_depth += 1
                depth = state.cascade_depth
                to_clear = expand_connected_same_color(board.cells, seeds)
                positions = sorted(to_clear)
                self.event_bus.emit(EVENT_MATCH_FOUND, seeds=seeds, positions=positions, depth=depth, reason=reason)
                if strategy.intercept_wave(ctx, to_clear):
                    # Wave handled by the strategy; it counts as one successful match.
                    match_count = 1
                    break
                clusters = clear_clusters(board.cells, to_clear)
                cluster_sizes = [len(cluster) for cluster in clusters]
                match_count += len(clusters)
                self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, positions=positions)

                before = board.snapshot()
                snapshot = board.snapshot()
                for r, c in to_clear:
                    snapshot[r][c] = None
                board.cells = snapshot
                self.event_bus.emit(
                    EVENT_MATCH_CLEARED,
                    positions=positions,
                    cluster_sizes=cluster_sizes,
                    cluster_count=len(clusters),
                    depth=depth,
                    reason=reason,
                )

                plan = compute_gravity_plan(snapshot, strategy.spawn_picker(ctx, snapshot))
                board.cells = plan.next_board
                strategy.after_commit(ctx)
                self.event_bus.emit(
                    EVENT_GRAVITY_APPLIED,
                    plan=plan,
                    survivors=plan.survivors,
                    spawns=plan.spawns,
                    depth=depth,
                )
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "Wave %d: seeds=%s clear=%s clusters=%s\nbefore:\n%s\nafter clear:\n%s\nafter collapse:\n%s",
                        depth, seeds, positions, cluster_sizes,
                        format_board(before, palette.names),
                        format_board(snapshot, palette.names),
                        format_board(board.cells, palette.names),
                    )
        finally:
            state.cascade_active = False
        self.event_bus.emit(
            EVENT_CASCADE_COMPLETE,
            depth=state.cascade_depth,
            match_count=match_count,
            strategy=strategy.name,
            awards_score=strategy.awards_score,
        )
        return match_count
