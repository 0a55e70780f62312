[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "destill"
version = "1.0.0"
description = "Triage CI/CD build failures: normalize log lines, rank findings into tiers and browse them in a terminal view"
requires-python = ">=3.10"
keywords = [
    "ci",
    "cd",
    "build",
    "logs",
    "triage",
    "buildkite",
    "github-actions",
    "failure-analysis",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Software Development :: Quality Assurance",
    "Topic :: System :: Logging",
]
dependencies = [
    "wcwidth",
    "blessed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["destill"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
