"""Shared pytest fixtures for the Igniter test suite.

Provides reusable fixtures for:
- The sample Prisma schema under ``tests/fixtures``
- Temporary project directories holding that schema
- A ``Config`` rooted at such a project
"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from igniter.config import Config


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Schema text
# ---------------------------------------------------------------------------

@pytest.fixture
def schema_file() -> Path:
    """Path of the sample schema (User, Profile, Post, Category)."""
    return FIXTURES_DIR / "schema.prisma"


@pytest.fixture
def schema_text(schema_file: Path) -> str:
    return schema_file.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path, schema_file: Path) -> Path:
    """Temporary project with ``prisma/schema.prisma`` copied from the fixture."""
    project_dir = tmp_path / "test-project"
    (project_dir / "prisma").mkdir(parents=True)
    shutil.copy(schema_file, project_dir / "prisma" / "schema.prisma")
    yield project_dir


@pytest.fixture
def empty_project_dir(tmp_path: Path) -> Path:
    """Temporary project without a schema file."""
    project_dir = tmp_path / "empty-project"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def config(tmp_project_dir: Path) -> Config:
    return Config(base_path=tmp_project_dir)
