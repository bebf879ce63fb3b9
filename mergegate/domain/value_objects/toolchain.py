import re

from pydantic import BaseModel, Field

# stable | beta | nightly | nightly-2024-01-31 | 1.67 | 1.67.0
TOOLCHAIN_CHANNEL_PATTERN = re.compile(
    r"^(stable|beta|nightly(-\d{4}-\d{2}-\d{2})?|\d+\.\d+(\.\d+)?)$"
)


class ToolchainSpec(BaseModel, frozen=True):
    """Toolchain pin for a check: a release channel or an exact version."""

    channel: str
    components: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return bool(TOOLCHAIN_CHANNEL_PATTERN.match(self.channel)) and all(
            c.strip() for c in self.components
        )

    @property
    def is_pinned_version(self) -> bool:
        return self.channel[:1].isdigit()

    def __str__(self) -> str:
        if self.components:
            return f"{self.channel} (+{', '.join(self.components)})"
        return self.channel
