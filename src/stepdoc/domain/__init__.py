"""Domain layer: document model, step payloads, ordering and mutations.

Nothing in this package performs I/O.
"""
