[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mikankernel"
version = "0.1.0"
description = "Parts of a small x86-64 hobby kernel as Python objects: graphics, fonts, frame buffers, console, memory, paging, timers, tasks, keyboard, PCI and ACPI."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "kernel",
    "operating-system",
    "framebuffer",
    "paging",
    "scheduler",
    "pci",
    "acpi",
    "console",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System Kernels",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mikankernel"]

[tool.pytest.ini_options]
addopts = "-ra"
