"""Elgar console: role-based authorization and action-report review workflow."""
