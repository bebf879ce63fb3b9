from enum import Enum


class EventKind(str, Enum):
    PUSH = "push"
    PULL_REQUEST = "pull_request"
