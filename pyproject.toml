[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "brlaser"
version = "6"
description = "Raster encoder for Brother laser printers, with a decoder that turns print data back into PBM images"
requires-python = ">=3.10"
dependencies = []
keywords = ["brother", "laser", "printer", "pcl", "pjl", "raster", "pbm"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Printing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
brdecode = "brlaser.brdecode:main"

[tool.hatch.build.targets.wheel]
packages = ["brlaser"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
