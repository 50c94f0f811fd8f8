"""QuickPlan client core: session lifecycle, schedule cache and AI chat sessions."""

__version__ = "0.1.0"
