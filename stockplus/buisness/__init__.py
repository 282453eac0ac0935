"""
Domain layer for Stock Plus.
Contains business rules for stock movements, staff production and payroll,
separated from data persistence concerns.
"""
