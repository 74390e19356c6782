"""sirecoder - agent-driven refactoring of Sire source files."""

__version__ = "0.1.0"
