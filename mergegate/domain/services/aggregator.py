from collections.abc import Iterable
from uuid import UUID, uuid4

from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.entities.run_outcome import RunOutcome, RunProgress
from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.value_objects import CheckStatus, RunStatus


class Aggregator:
    """Combines per-check results into a run-level decision.

    Results are keyed by check name and ordered by the registry order given
    at construction, so arrival order never affects the outcome.
    """

    def __init__(self, check_names: Iterable[str]) -> None:
        self.check_names = list(check_names)
        if not self.check_names:
            raise ValueError("Aggregator needs at least one check name")
        if len(set(self.check_names)) != len(self.check_names):
            raise ValueError(f"Duplicate check names: {self.check_names}")

    def collect(self, results: Iterable[CheckResult]) -> dict[str, CheckResult]:
        by_name: dict[str, CheckResult] = {}
        for result in results:
            if result.check_name not in self.check_names:
                raise ValueError(f"Result for unknown check: {result.check_name}")
            if result.check_name in by_name:
                raise ValueError(f"Duplicate result for check: {result.check_name}")
            by_name[result.check_name] = result
        return {name: by_name[name] for name in self.check_names if name in by_name}

    def overall_status(self, results: dict[str, CheckResult]) -> RunStatus:
        statuses = [r.status for r in results.values()]
        if any(s.is_rejection for s in statuses):
            return RunStatus.FAILED
        if len(results) == len(self.check_names) and all(
            s == CheckStatus.PASSED for s in statuses
        ):
            return RunStatus.PASSED
        return RunStatus.PENDING

    def progress(self, results: Iterable[CheckResult]) -> RunProgress:
        """Partial view for in-flight reporting; a rejection shows up immediately."""
        collected = self.collect(results)
        status = self.overall_status(collected)
        filled = {
            name: collected.get(name) or CheckResult(check_name=name)
            for name in self.check_names
        }
        return RunProgress(results=filled, status=status)

    def aggregate(
        self,
        event: TriggerEvent,
        results: Iterable[CheckResult],
        run_id: UUID | None = None,
    ) -> RunOutcome:
        """Finalize a run. Every registered check must have a final result."""
        collected = self.collect(results)

        missing = [n for n in self.check_names if n not in collected]
        if missing:
            raise ValueError(f"Missing results for checks: {', '.join(missing)}")
        open_checks = [n for n, r in collected.items() if not r.is_final]
        if open_checks:
            raise ValueError(f"Results not finalized for checks: {', '.join(open_checks)}")

        return RunOutcome(
            id=run_id or uuid4(),
            event=event,
            results=collected,
            status=self.overall_status(collected),
        )
