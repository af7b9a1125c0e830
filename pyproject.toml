[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cloudvolume"
version = "0.1.0"
description = "Helpers for cloud volume provisioning: size rounding to allocation units, zone selection and volume errors."
requires-python = ">=3.10"
dependencies = []
keywords = ["volume", "storage", "zones", "provisioning", "cloud", "quantity"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
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

[tool.hatch.build.targets.wheel]
packages = ["cloudvolume"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
