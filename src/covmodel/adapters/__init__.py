"""Report adapters for covmodel."""
