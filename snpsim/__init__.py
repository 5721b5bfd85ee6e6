"""Case-control SNP data tools: control files, phased data, disease models, output, statistics and datasets."""

__version__ = "0.1.0"