"""Settings, logging, exceptions and observable state."""
