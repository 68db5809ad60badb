"""Baseline availability timeline: feed ingestion, normalization and caching."""
