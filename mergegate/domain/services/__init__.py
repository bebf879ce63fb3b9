from mergegate.domain.services.aggregator import Aggregator
from mergegate.domain.services.trigger_filter import TriggerFilter

__all__ = [
    "Aggregator",
    "TriggerFilter",
]
