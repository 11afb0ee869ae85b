"""Multi-step award nomination flow with trade lookup and quality feedback."""

__version__ = "0.1.0"
