"""Kida integration and perch's own page templates."""

from perch.templating.integration import create_environment, render_template

__all__ = ["create_environment", "render_template"]
