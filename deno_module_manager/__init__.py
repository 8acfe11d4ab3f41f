"""
Deno Module Manager

Checks the deno.land imports declared in a deps.ts file for newer releases
and rewrites them in place.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
