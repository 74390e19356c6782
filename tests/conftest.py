"""Pytest fixtures for sirecoder tests."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest
import structlog

from sirecoder.agents.fake import FakeAgent
from sirecoder.config import SirecoderConfig
from sirecoder.infra.command import CommandRunner

TAB_SOURCE = """\
; Tabs

#### sire_12_tab <- sire_11_set

:| sire_11_set

^-^
^-^ tabSing _MkTab isTab
^-^
^-^ tabLookup tabMinKey tabFoldlWithKey
^-^

> Tab k v > Bit
= (_TabIsEmpty tab) | null (_TabVals tab)
= (_TabHas k t)     | setHas k (_TabKeys t)
= (_TabLookup k t)  | if (_TabHas k t) (SOME | tabIdx k t) NONE

=?= NONE   | _TabLookup 3 | _MkTab [1 5] [5 1]
=?= SOME-1 | _TabLookup 1 | _MkTab [1 5] [5 1]

= tabLookup        | _TabLookup
= tabKeysSet       | _TabKeys

> Tab k v > Nat
= (tabLen t)
| len (_TabKeys t)

!! eql 0 (tabLen emptyTab)
"""

SANDBOX_SOURCE = """\
#### sandbox <- kern

:| sire
:| kern

= (findDeadCogids reqs resp)
'hole
"""


@pytest.fixture
def sire_tree(tmp_path: Path) -> Path:
    """Create a small Sire source tree.

    Layout:
    - sire/sandbox.sire (imports sire and kern)
    - sire/kern.sire
    - sire/sire_11_set.sire
    - sire/sire_12_tab.sire (exports and definitions)
    """
    root = tmp_path / "sire"
    root.mkdir()
    (root / "sandbox.sire").write_text(SANDBOX_SOURCE)
    (root / "kern.sire").write_text("\n= kern 1\n\n")
    (root / "sire_11_set.sire").write_text("= setHas 1\n")
    (root / "sire_12_tab.sire").write_text(TAB_SOURCE)
    return root


@pytest.fixture
def fake_agent() -> FakeAgent:
    """Create a FakeAgent with an empty script."""
    return FakeAgent()


@pytest.fixture
def command_runner() -> CommandRunner:
    """Create a CommandRunner instance without heartbeat logging."""
    return CommandRunner(heartbeat_interval=0)


@pytest.fixture
def default_config() -> SirecoderConfig:
    """Create a default SirecoderConfig."""
    return SirecoderConfig.default()


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()
