[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "loguruish"
version = "0.1.18"
description = "A small logging toolkit: context stacks, error helpers, text formatting, configuration and a batching background logger."
requires-python = ">=3.11"
dependencies = []
keywords = ["logging", "context", "formatter", "async", "structured-logging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["loguruish"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
