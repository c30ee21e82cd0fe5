"""Attendance Ledger package.

Organized by feature modules (attendance, database, ...) with a thin Flask
controller layer over the ledger service and its repositories.
"""
