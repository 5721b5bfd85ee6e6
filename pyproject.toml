[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snpsim"
version = "0.1.0"
description = "Case-control SNP data tools: control files, phased data, disease models, output writers, genotype datasets and GA sizing"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "genetics",
    "gwas",
    "snp",
    "case-control",
    "disease-model",
    "genotype",
]
classifiers = [
    "Development Status :: 4 - Beta",
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
snpsim-probability = "snpsim.probability:main"

[tool.hatch.build.targets.wheel]
packages = ["snpsim"]

[tool.pytest.ini_options]
addopts = "-ra"
