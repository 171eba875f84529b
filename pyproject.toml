[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "csreports"
version = "1.0.0"
description = "Markdown reports and plain-text conversion for customer calls and emails"
requires-python = ">=3.10"
dependencies = []
keywords = ["markdown", "html", "reports", "transcripts", "email"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Markup :: Markdown",
    "Topic :: Text Processing :: Markup :: HTML",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["csreports"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
