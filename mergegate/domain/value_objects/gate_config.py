from pydantic import BaseModel, Field, field_validator

from mergegate.domain.value_objects.branch import normalize_branch

DEFAULT_TRUNK_BRANCH = "master"
DEFAULT_MSRV = "1.67.0"

# Matches the hosted runner's default job limit (6 hours).
DEFAULT_CHECK_TIMEOUT_S = 6 * 60 * 60


class GateConfig(BaseModel, frozen=True):
    """Process-wide gate settings, built once and passed explicitly."""

    trunk_branch: str = DEFAULT_TRUNK_BRANCH
    stable_toolchain: str = "stable"
    msrv: str = DEFAULT_MSRV
    nightly_toolchain: str = "nightly"
    check_timeout_s: int = Field(default=DEFAULT_CHECK_TIMEOUT_S, gt=0)
    provision_attempts: int = Field(default=1, ge=1)
    output_tail_chars: int = Field(default=4000, ge=0)

    @field_validator("trunk_branch")
    @classmethod
    def validate_trunk_branch(cls, v: str) -> str:
        v = normalize_branch(v)
        if not v:
            raise ValueError("Trunk branch name must not be empty")
        return v
