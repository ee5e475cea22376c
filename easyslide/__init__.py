"""Upload a markdown file, get a reveal.js slide deck."""

__version__ = "0.1.0"
