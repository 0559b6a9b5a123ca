[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ledbasic"
version = "0.1.0"
description = "A small integer BASIC compiler and stack-machine interpreter for scripting LED strip animations"
requires-python = ">=3.10"
dependencies = []
keywords = ["basic", "interpreter", "bytecode", "led", "animation", "scripting"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ledbasic = "ledbasic.cli:main"
ledbasic-shell = "ledbasic.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["ledbasic"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
