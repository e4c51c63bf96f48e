"""Reports — work-time derivation, declaration/session join and export sinks."""
