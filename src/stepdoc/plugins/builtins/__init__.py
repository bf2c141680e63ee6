"""Built-in plugins shipped with stepdoc."""
