[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mauengine"
version = "0.1.0"
description = "Core game-engine services: logging, profiling, an entity-component system, scenes, cameras, input mapping and asset data."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["game engine", "ecs", "entity component system", "profiler", "camera", "input"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mauengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
