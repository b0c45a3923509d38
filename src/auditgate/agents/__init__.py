"""Agents for audit orchestration.

Provides:
- BaseAgent: Shared run identity, logging and workspace handling
- AuditAgent: yarn audit -> decode -> classify -> report pipeline
"""

from .base import BaseAgent
from .audit import AuditAgent

__all__ = ["BaseAgent", "AuditAgent"]
