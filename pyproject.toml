[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tm2kit"
version = "0.1.0"
description = "TIM2 (.tm2) image reader, LZSS archive unpacker, tileset and tilemap tools"
requires-python = ">=3.10"
dependencies = ["pillow"]
keywords = ["tim2", "tm2", "lzss", "psp", "tilemap", "tileset", "image", "unpacker", "png"]
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
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: System :: Archiving",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tm2kit-unpack = "tm2kit.unpack_cli:main"
tm2kit-png = "tm2kit.tm2_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tm2kit"]

[tool.pytest.ini_options]
addopts = "-ra"
