"""On-device storage."""
