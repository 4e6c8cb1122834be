"""Publish orchestration: promotion checks, script execution, tagging, reporting."""
