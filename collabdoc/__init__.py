"""collabdoc: collaborative documentation sessions for humans and AI agents."""

__version__ = "0.1.0"
