import asyncio
from collections.abc import Callable
from uuid import uuid4

from loguru import logger

from mergegate.application.services.run_tracker import RunTracker
from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.check_registry import CheckRegistry, ConfigurationError
from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.entities.run_outcome import RunOutcome
from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.ports.check_runner_port import CheckRunnerPort
from mergegate.domain.ports.environment_port import EnvironmentPort, ProvisioningError
from mergegate.domain.ports.run_store_port import RunStorePort
from mergegate.domain.services.aggregator import Aggregator
from mergegate.domain.services.trigger_filter import TriggerFilter
from mergegate.domain.value_objects import ErrorKind, GateConfig

# Called whenever a check changes state (RUNNING, then its final status)
ResultCallback = Callable[[CheckResult], None]


class GateEvaluator:
    """Runs every registered check for a trigger event and decides the gate.

    One task per check, each in its own workspace, all in parallel. Check
    failures and infrastructure errors are recorded per check and never stop
    sibling checks; configuration errors abort the run before any check
    starts.
    """

    def __init__(
        self,
        config: GateConfig,
        registry: CheckRegistry,
        check_runner: CheckRunnerPort,
        environment: EnvironmentPort,
        run_store: RunStorePort | None = None,
    ) -> None:
        self.config = config
        self.registry = registry.freeze()
        self.check_runner = check_runner
        self.environment = environment
        self.run_store = run_store
        self.trigger_filter = TriggerFilter(config)
        self.tracker = RunTracker()

    async def evaluate(
        self,
        event: TriggerEvent,
        on_result: ResultCallback | None = None,
    ) -> RunOutcome | None:
        """Evaluate the gate for one event.

        Returns None when the event does not target the trunk branch.
        A newer event with the same concurrency key cancels this run; its
        unfinished checks are reported ERRORED (cancelled).

        Raises:
            ConfigurationError: If the registry has static defects.
        """
        if not self.trigger_filter.should_run(event):
            logger.info(
                "No run for {}: trunk branch is '{}'",
                event.describe(),
                self.config.trunk_branch,
            )
            return None

        problems = self.registry.validate()
        if problems:
            for problem in problems:
                logger.error("Configuration error: {}", problem)
            raise ConfigurationError(problems)

        aggregator = Aggregator(self.registry.names())
        run_id = uuid4()
        key = event.concurrency_key
        logger.info(
            "Run {} started for {} with checks: {}",
            run_id,
            event.describe(),
            ", ".join(self.registry.names()),
        )

        tasks = [
            asyncio.create_task(
                self._run_check(definition, event, on_result),
                name=f"check-{definition.name}-{run_id.hex[:8]}",
            )
            for definition in self.registry
        ]
        self.tracker.start(key, run_id, tasks)
        try:
            gathered = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            self.tracker.finish(key, run_id)

        results: list[CheckResult] = []
        for definition, item in zip(self.registry, gathered, strict=True):
            # A task cancelled before its first step never reaches _run_check
            if isinstance(item, asyncio.CancelledError):
                item = CheckResult.errored(
                    definition.name, ErrorKind.CANCELLED, "Cancelled before start"
                )
                if on_result:
                    on_result(item)
            elif isinstance(item, BaseException):
                raise item
            results.append(item)

        outcome = aggregator.aggregate(event, results, run_id=run_id)
        if outcome.accepted:
            logger.info("Run {} accepted", run_id)
        else:
            logger.warning("Run {} {}", run_id, outcome.rejection_summary())

        if self.run_store is not None:
            await self.run_store.save(outcome)
        return outcome

    def cancel(self, concurrency_key: str) -> bool:
        """Cancel the in-flight run for a key. Returns False if none is running."""
        return self.tracker.cancel(concurrency_key)

    async def _run_check(
        self,
        definition: CheckDefinition,
        event: TriggerEvent,
        on_result: ResultCallback | None,
    ) -> CheckResult:
        result = CheckResult(check_name=definition.name)
        result.mark_running()
        if on_result:
            on_result(result)

        timeout_s = definition.timeout_s or self.config.check_timeout_s
        try:
            async with asyncio.timeout(timeout_s):
                final = await self._provision_and_run(definition, event)
        except TimeoutError:
            logger.warning("Check '{}' timed out after {}s", definition.name, timeout_s)
            result.mark_errored(ErrorKind.TIMEOUT, f"Timed out after {timeout_s}s")
            final = result
        except asyncio.CancelledError:
            logger.warning("Check '{}' cancelled", definition.name)
            result.mark_errored(ErrorKind.CANCELLED, "Cancelled before completion")
            final = result
        except ProvisioningError as e:
            logger.error("Check '{}' could not be provisioned: {}", definition.name, e)
            result.mark_errored(ErrorKind.PROVISIONING, str(e))
            final = result
        except Exception as e:
            logger.exception("Check '{}' crashed", definition.name)
            result.mark_errored(ErrorKind.INTERNAL, f"{type(e).__name__}: {e}")
            final = result

        if not final.is_final or final.check_name != definition.name:
            result.mark_errored(ErrorKind.INTERNAL, "Check runner returned an unusable result")
            final = result

        if on_result:
            on_result(final)
        return final

    async def _provision_and_run(
        self,
        definition: CheckDefinition,
        event: TriggerEvent,
    ) -> CheckResult:
        workspace = await self.environment.provision(definition, event)
        try:
            return await self.check_runner.run_check(definition, workspace)
        finally:
            try:
                await self.environment.release(workspace)
            except OSError as e:
                logger.warning("Could not release workspace for '{}': {}", definition.name, e)
