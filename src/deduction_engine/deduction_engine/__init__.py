"""Attendance deduction engine package.

Turns raw biometric punches into daily attendance summaries, timesheet rows and
payroll deductions. Organized by feature modules (punches, attendance,
deductions, notifications, ...) with a thin Flask controller layer over
service/repository layers.
"""
