"""Plugin system: pluggy hook specs, manager, and built-in plugins."""
