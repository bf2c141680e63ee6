"""stepdoc — document model and mutation engine for step-by-step documents."""

__version__ = "0.1.0"
