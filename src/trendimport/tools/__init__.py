"""Developer tools: timing hooks and the ``inspect_import`` command line."""
