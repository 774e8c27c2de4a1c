"""Farm engine: laborer payroll, feed batch costing and egg pricing."""

__version__ = "0.1.0"
