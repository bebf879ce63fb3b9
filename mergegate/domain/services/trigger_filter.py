from loguru import logger

from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.value_objects import EventKind, GateConfig


class TriggerFilter:
    """Decides whether a trigger event should spawn a gate run.

    Only push and pull_request events aimed at the configured trunk branch
    pass; everything else is ignored without producing results.
    """

    def __init__(self, config: GateConfig) -> None:
        self.trunk_branch = config.trunk_branch

    def should_run(self, event: TriggerEvent) -> bool:
        if event.kind not in (EventKind.PUSH, EventKind.PULL_REQUEST):
            return False
        matched = event.target_branch == self.trunk_branch
        if not matched:
            logger.debug(
                "Ignoring {} for branch '{}' (trunk is '{}')",
                event.kind.value,
                event.target_branch,
                self.trunk_branch,
            )
        return matched
