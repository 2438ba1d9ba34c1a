"""Data models and exceptions for Colony swarm coordination."""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any


class SwarmError(Exception):
    """Base exception for Swarm operations."""


class ConfigurationError(SwarmError):
    """Raised when a swarm or coordinator is not set up to do the requested work."""


class AgentNotFoundError(SwarmError, LookupError):
    """Raised when an agent id does not resolve to a registered agent."""

    def __init__(self, agent_id: str):
        self.agent_id = agent_id
        super().__init__(f"Agent with ID {agent_id!r} not found in the swarm")


class MessageType(str, Enum):
    """Kinds of communication recorded in the ledger."""

    TASK = "task"
    RESPONSE = "response"
    INFO = "info"
    QUERY = "query"


class CoordinationPhase(str, Enum):
    """Phases of a master-worker coordination call."""

    DECOMPOSE = "decompose"
    FALLBACK = "fallback"
    DISTRIBUTE = "distribute"
    AGGREGATE = "aggregate"


def generate_message_id() -> str:
    """Return a 128-bit random id as 32 hex characters."""
    return secrets.token_hex(16)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """An immutable record of one agent-to-agent communication.

    Recording a message in a swarm ledger neither delivers nor executes
    anything. An empty ``recipient_ids`` marks a broadcast to every agent
    except the sender.
    """

    sender_id: str
    recipient_ids: tuple[str, ...]
    content: str
    message_type: MessageType = MessageType.INFO
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)
    id: str = field(default_factory=generate_message_id)
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        if isinstance(self.recipient_ids, str):
            raise TypeError(
                f"recipient_ids must be a sequence of agent ids, not a string: {self.recipient_ids!r}"
            )
        object.__setattr__(self, "recipient_ids", tuple(self.recipient_ids))
        object.__setattr__(self, "message_type", MessageType(self.message_type))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def is_broadcast(self) -> bool:
        return not self.recipient_ids

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "recipient_ids": list(self.recipient_ids),
            "content": self.content,
            "type": self.message_type.value,
            "metadata": dict(self.metadata),
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Message:
        return cls(
            sender_id=data["sender_id"],
            recipient_ids=tuple(data.get("recipient_ids", [])),
            content=data["content"],
            message_type=MessageType(data.get("type", MessageType.INFO.value)),
            metadata=data.get("metadata", {}),
            id=data["id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )
