BRANCH_REF_PREFIX = "refs/heads/"


def normalize_branch(branch: str) -> str:
    """Strip a ``refs/heads/`` prefix so refs and short names compare equal."""
    branch = branch.strip()
    if branch.startswith(BRANCH_REF_PREFIX):
        return branch[len(BRANCH_REF_PREFIX) :]
    return branch
