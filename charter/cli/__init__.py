"""
Charter CLI.

The `charter` command builds API description documents from controller
definitions and renders documentation pages.

Usage:
    charter build myapp.api:controllers --format yaml --output openapi.yaml
    charter docs --title "My API" --style redoc
    charter version
"""

from .. import __version__

__cli_name__ = "charter"
