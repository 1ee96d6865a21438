"""Back-office payroll package.

This package is organized by feature modules (attendance, payroll, liquidations, ...)
with a thin Flask controller layer and service/repository layers underneath.
The calculation engine (salary config, adjustment rules, calculators, validator)
is pure and holds no I/O.
"""
