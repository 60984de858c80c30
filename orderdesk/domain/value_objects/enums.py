"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AgentRole(str, Enum):
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    AGENT = "AGENT"
    AGENT_TEST = "AGENT_TEST"
