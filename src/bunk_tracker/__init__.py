"""Bunk Tracker package.

This package is organized by feature modules (subjects, attendance, prediction, ...)
with pure calculation code, an in-memory entity store kept in sync with a remote
backend, and a thin Flask controller layer.
"""
