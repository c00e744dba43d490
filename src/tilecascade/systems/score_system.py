from esper import World

from tilecascade.events.bus import EventBus, EVENT_CASCADE_COMPLETE, EVENT_GAME_RESET, EVENT_SCORE_CHANGED
from tilecascade.utils.resources import get_rules, get_score


class ScoreSystem:
    """Awards points for cleared clusters under scoring rule sets."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self.on_cascade_complete)
        self.event_bus.subscribe(EVENT_GAME_RESET, self.on_game_reset)

    def on_cascade_complete(self, sender, **kwargs):
        if not kwargs.get('awards_score'):
            return
        match_count = kwargs.get('match_count') or 0
        if match_count <= 0:
            return
        self.add(get_rules(self.world).score_per_match * match_count)

    def on_game_reset(self, sender, **kwargs):
        score = get_score(self.world)
        delta = -score.value
        score.value = 0
        self.event_bus.emit(EVENT_SCORE_CHANGED, value=0, delta=delta)

    def add(self, amount: int) -> int:
        score = get_score(self.world)
        score.value += amount
        self.event_bus.emit(EVENT_SCORE_CHANGED, value=score.value, delta=amount)
        return score.value
