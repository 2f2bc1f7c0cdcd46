"""Feature modules: configuration and structured session cache."""
