"""Build Markdown context files from GitHub repositories, local directories and web pages."""

__version__ = "0.1.0"