from datetime import UTC, datetime

from pydantic import BaseModel, Field

from mergegate.domain.value_objects import EventKind, normalize_branch


class TriggerEvent(BaseModel, frozen=True):
    """A push or pull-request notification.

    For pushes ``branch`` is the pushed branch; for pull requests it is the
    base branch the change targets.
    """

    kind: EventKind
    branch: str
    commit: str | None = None
    pull_request: int | None = None
    received_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def target_branch(self) -> str:
        return normalize_branch(self.branch)

    @property
    def concurrency_key(self) -> str:
        """Events sharing a key supersede each other."""
        if self.kind == EventKind.PULL_REQUEST and self.pull_request is not None:
            return f"pr-{self.pull_request}"
        return f"{self.kind.value}-{self.target_branch}"

    @property
    def checkout_ref(self) -> str:
        """Ref each workspace checks out.

        Pushes without a commit fall back to the target branch tip. A pull
        request has no such fallback: the base branch tip is not the change.

        Raises:
            ValueError: If a pull request event carries no commit.
        """
        if self.commit:
            return self.commit
        if self.kind == EventKind.PULL_REQUEST:
            raise ValueError(f"{self.describe()} has no commit to check out")
        return f"origin/{self.target_branch}"

    def describe(self) -> str:
        if self.kind == EventKind.PULL_REQUEST:
            pr = f" #{self.pull_request}" if self.pull_request is not None else ""
            return f"pull_request{pr} -> {self.target_branch}"
        commit = f" @ {self.commit[:10]}" if self.commit else ""
        return f"push to {self.target_branch}{commit}"
