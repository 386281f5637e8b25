"""AI-driven browser automation agent backed by Browserbase and Stagehand."""

__version__ = "1.0.0"

__all__ = ["__version__"]
