# Path: core/__init__.py
# Purpose: Package initializer for core application layer.
# Layer: core.
# Details: Aggregates subpackages for embedders, indexing, ranking, enrichment, persistence, and models.
