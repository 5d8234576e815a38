"""
Test suite for ldquery

Unit tests for canonicalization, normalization, merging, schema discovery,
the query engine, templates/export, labels, settings and the CLI.
"""
