"""Frame sources and manifest export."""
