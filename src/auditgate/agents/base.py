"""Base agent with shared patterns for audit orchestration.

Provides:
- BaseAgent with a run id, bound structured logger and scoped workspace
"""

import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator
from uuid import uuid4

import structlog

logger = structlog.get_logger()


class BaseAgent:
    """Base agent with run identity and transient workspace handling.

    Provides common functionality for all agents:
    - Run ID management
    - Structured logging bound to the run
    - Temporary working directory removed on every exit path
    """

    def __init__(self, run_id: str | None = None):
        """Initialize base agent.

        Args:
            run_id: Optional run ID (generates new UUID if not provided)
        """
        self.run_id = run_id or str(uuid4())
        self.log = logger.bind(agent=self.__class__.__name__, run_id=self.run_id)

    @asynccontextmanager
    async def workspace(self) -> AsyncIterator[Path]:
        """Temporary directory for transient files of this run.

        Example:
            >>> async with self.workspace() as workdir:
            ...     output_path = workdir / "audit-1.jsonl"
        """
        with tempfile.TemporaryDirectory(prefix="improved-audit-") as workdir:
            self.log.debug("workspace_created", path=workdir)
            try:
                yield Path(workdir)
            finally:
                self.log.debug("workspace_removed", path=workdir)
