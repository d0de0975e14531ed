"""Igniter -- feature-first code generator driven by a Prisma schema.

Library diagnostics go through loguru and are silenced by default; the CLI
enables them with ``--verbose``.
"""

from loguru import logger

__version__ = "0.1.0"

logger.disable("igniter")
