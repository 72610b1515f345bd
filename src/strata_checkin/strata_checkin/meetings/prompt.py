from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, Protocol, TypeVar

from .model import MeetingDetails

T = TypeVar("T")


@dataclass(frozen=True)
class PromptResult(Generic[T]):
    """Answer from an interactive prompt: a value, or cancelled."""

    value: Optional[T] = None
    cancelled: bool = False

    @classmethod
    def of(cls, value: T) -> "PromptResult[T]":
        return cls(value=value)

    @classmethod
    def cancel(cls) -> "PromptResult[T]":
        return cls(cancelled=True)


class MeetingPrompt(Protocol):
    async def ask_meeting_details(self, plan_id: str) -> PromptResult[MeetingDetails]:
        raise NotImplementedError
