[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "otelop"
version = "0.1.0"
description = "Core logic of an OpenTelemetry Collector operator: collector resources, receiver port discovery, labels and annotations, configuration with platform detection, and reconciliation tasks."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["opentelemetry", "collector", "kubernetes", "operator", "observability"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["otelop"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
