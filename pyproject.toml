[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "keyshift"
version = "0.14.3"
description = "Key remapping configuration, input event model and action dispatch for Linux input devices"
requires-python = ">=3.11"
dependencies = [
    "pyyaml",
]
keywords = ["keyboard", "remap", "evdev", "modmap", "keymap", "linux", "niri"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["keyshift"]

[tool.pytest.ini_options]
addopts = "-ra"
