[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "contextforge"
version = "0.1.0"
description = "Build Markdown context files from GitHub repositories, local directories and web pages."
requires-python = ">=3.10"
keywords = ["markdown", "context", "llm", "github", "web-scraping", "documentation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Markup :: Markdown",
    "Topic :: Utilities",
]
dependencies = [
    "requests",
    "beautifulsoup4",
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
contextforge = "contextforge.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["contextforge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
