"""Session, schedule and conversation managers."""
