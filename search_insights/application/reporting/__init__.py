"""Reporting helpers: selection and display formatting."""
