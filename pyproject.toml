[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xfstool"
version = "0.1.0"
description = "Create and manage XFS disk images, with the word, memory, register and disk primitives of the XSM machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["xfs", "xsm", "disk image", "filesystem", "teaching os"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xfs-interface = "xfstool.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["xfstool"]

[tool.pytest.ini_options]
addopts = "-ra"
