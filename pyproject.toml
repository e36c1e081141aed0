[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ossim"
version = "0.1.0"
description = "Simulations of classic operating-system algorithms: CPU and disk scheduling, paging, placement, deadlock handling, synchronisation and small card-driven virtual machines."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating systems",
    "scheduling",
    "page replacement",
    "deadlock",
    "bankers algorithm",
    "disk scheduling",
    "virtual machine",
    "simulation",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ossim-phase1 = "ossim.vm_phase1:main"
ossim-phase2 = "ossim.vm_phase2:main"
ossim-paged = "ossim.vm_paged:main"

[tool.hatch.build.targets.wheel]
packages = ["ossim"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
