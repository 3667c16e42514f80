[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "matcomguard"
version = "0.1.0"
description = "Watch running processes for excessive CPU and RAM use, and watch newly connected drives for file changes"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["monitoring", "processes", "cpu", "memory", "usb", "drives", "filesystem"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
matcomguard = "matcomguard.monitor:main"
matcomguard-usb = "matcomguard.usb:main"

[tool.hatch.build.targets.wheel]
packages = ["matcomguard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
