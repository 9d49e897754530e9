"""Loan and chit fund overdue, profit and cash flow computations."""

__version__ = "0.1.0"
