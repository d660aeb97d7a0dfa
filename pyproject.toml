[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "udr"
version = "1.0.0"
description = "Unified Data Repository procedures for a 5G core: subscription, application and registration data with change notifications."
requires-python = ">=3.10"
dependencies = []
keywords = ["5g", "udr", "core-network", "subscription-data", "3gpp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Telephony",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["udr"]

[tool.hatch.build.targets.sdist]
include = ["udr", "tests", "README.md"]

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
