"""REST gateway to the QuickPlan backend."""
