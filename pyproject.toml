[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "organtuning"
version = "0.3.0"
description = "MIDI Tuning Standard client and SysEx parser, channel masks, keyboard maps and console layout helpers for a pipe organ synthesizer"
requires-python = ">=3.10"
dependencies = []
keywords = ["midi", "tuning", "mts", "sysex", "microtuning", "organ"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["organtuning"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
