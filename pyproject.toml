[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sudokuvision"
version = "0.1.0"
description = "Find the grid in a sudoku picture, recognise digits with a small neural network, and solve grids by backtracking."
requires-python = ">=3.10"
keywords = [
    "sudoku",
    "image-recognition",
    "canny",
    "hough-transform",
    "neural-network",
    "solver",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
    "Topic :: Games/Entertainment :: Puzzle Games",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sudokuvision-train = "sudokuvision.trainer:main"
sudokuvision-legacy = "sudokuvision.legacy:main"

[tool.hatch.build.targets.wheel]
packages = ["sudokuvision"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
