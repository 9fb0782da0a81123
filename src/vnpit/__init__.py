"""Vietnamese personal income tax payroll calculator."""
