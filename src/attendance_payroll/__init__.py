"""Attendance & payroll engine for a multi-tenant back office."""
