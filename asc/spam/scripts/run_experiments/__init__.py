"""
Repeated train/test experiments for anti-spam classification methods.

This module evaluates classification methods on ham/spam datasets over many
randomized train/test partitions with support for:
- Reproducible prime seed sequences, identical for every method and dataset
- Per-run and aggregated (mean ± standard deviation) summary lines
- Outlier run removal with replacement runs
- Empty-pattern messages appended to testing sets
- Persisting datasets (ARFF), partitions (CSV) and trained models
- CSV reporting of the aggregated statistics per configuration

Usage:
    python -m asc.spam.scripts.run_experiments.run --config path/to/config.yaml
"""
