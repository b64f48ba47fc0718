[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snpbarcode"
version = "0.1.0"
description = "Building blocks for a genetic-algorithm search for SNP barcodes that separate case and control genotype data sets"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "genetics",
    "gwas",
    "snp",
    "genetic-algorithm",
    "bioinformatics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
snpbarcode-fill-crohn = "snpbarcode.crohn_filler:main"
snpbarcode-model = "snpbarcode.distribution:main"
snpbarcode-select-ceu = "snpbarcode.ceu_select:main"

[tool.hatch.build.targets.wheel]
packages = ["snpbarcode"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
