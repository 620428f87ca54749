"""Core domain: models, ports and the output-log pipeline."""
