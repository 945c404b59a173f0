"""Output reporters for covmodel."""

from covmodel.reporters.terminal import CLIReporter, reporter

__all__ = ["CLIReporter", "reporter"]
