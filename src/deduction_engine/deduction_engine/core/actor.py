from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import ActorKind


@dataclass(frozen=True)
class Actor:
    """Who a processing run writes records on behalf of.

    Scheduled runs act as ``Actor.system()`` and persist no user id; a run
    started by a reviewer carries that reviewer's id.
    """

    kind: ActorKind
    user_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is ActorKind.USER and not self.user_id:
            raise ValueError("user actor requires a user_id")
        if self.kind is ActorKind.SYSTEM and self.user_id is not None:
            raise ValueError("system actor cannot carry a user_id")

    @classmethod
    def system(cls) -> "Actor":
        return cls(kind=ActorKind.SYSTEM)

    @classmethod
    def user(cls, user_id: str) -> "Actor":
        return cls(kind=ActorKind.USER, user_id=str(user_id))

    @property
    def is_system(self) -> bool:
        return self.kind is ActorKind.SYSTEM
