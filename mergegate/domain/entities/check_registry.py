from collections.abc import Iterable, Iterator

from mergegate.domain.entities.check_definition import CheckDefinition


class ConfigurationError(Exception):
    """Static defect in the gate configuration; fatal to the whole run."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Invalid gate configuration: " + "; ".join(problems))


class RegistryFrozenError(Exception):
    """Raised when registering into a frozen CheckRegistry."""


class CheckRegistry:
    """Insertion-ordered, name-keyed set of CheckDefinitions.

    Read-only after ``freeze()``. Iteration order is registration order,
    which drives reporting order; checks do not depend on each other.
    """

    def __init__(self, definitions: Iterable[CheckDefinition] = ()) -> None:
        self._checks: dict[str, CheckDefinition] = {}
        self._frozen = False
        for definition in definitions:
            self.register(definition)

    def register(self, definition: CheckDefinition) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register '{definition.name}': registry is frozen")
        if definition.name in self._checks:
            raise ConfigurationError([f"Duplicate check name: {definition.name}"])
        self._checks[definition.name] = definition

    def freeze(self) -> "CheckRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> CheckDefinition | None:
        return self._checks.get(name)

    def names(self) -> list[str]:
        return list(self._checks)

    def validate(self) -> list[str]:
        """Collect every configuration defect instead of stopping at the first."""
        if not self._checks:
            return ["No checks are registered"]
        problems: list[str] = []
        for definition in self._checks.values():
            problems.extend(definition.problems())
        return problems

    def __iter__(self) -> Iterator[CheckDefinition]:
        return iter(list(self._checks.values()))

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: object) -> bool:
        return name in self._checks
