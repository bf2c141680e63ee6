"""Service layer — the command/query boundary over the mutation engine."""
