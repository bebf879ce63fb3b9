import shlex

from pydantic import BaseModel, Field

from mergegate.domain.value_objects import ToolchainSpec


class CheckDefinition(BaseModel, frozen=True):
    """One named verification step.

    Commands run in order inside a fresh workspace with ``toolchain``
    installed. ``toolchain.components`` are the setup preconditions
    installed before any command runs.
    """

    name: str
    title: str = ""
    commands: tuple[str, ...]
    toolchain: ToolchainSpec
    env: dict[str, str] = Field(default_factory=dict)
    timeout_s: int | None = None

    @property
    def display_name(self) -> str:
        return self.title or self.name

    def problems(self) -> list[str]:
        """Static configuration defects, empty when the definition is usable."""
        found: list[str] = []
        label = self.name or "<unnamed>"

        if not self.name.strip():
            found.append("Check has an empty name")
        if not self.commands:
            found.append(f"Check '{label}' has no commands")
        for command in self.commands:
            if not command.strip():
                found.append(f"Check '{label}' has an empty command")
                continue
            try:
                shlex.split(command)
            except ValueError as e:
                found.append(f"Check '{label}' has a malformed command `{command}`: {e}")
        if not self.toolchain.is_valid:
            found.append(f"Check '{label}' references an invalid toolchain: {self.toolchain}")
        if self.timeout_s is not None and self.timeout_s <= 0:
            found.append(f"Check '{label}' has a non-positive timeout: {self.timeout_s}")
        return found
