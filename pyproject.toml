[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hrtfkit"
version = "1.3.0"
description = "HRTF set processing: validation, resampling, loudness normalisation, nearest-neighbour lookup and filter interpolation"
requires-python = ">=3.10"
dependencies = []
keywords = ["hrtf", "hrir", "sofa", "binaural", "spatial audio", "resampling", "kd-tree"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hrtfkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
