"""Framework layer: configuration, exceptions, logging, naming helpers."""
