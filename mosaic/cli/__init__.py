"""
Command Line Interface for mosaic-evolution.

Commands:
- mosaic run: Evolve an approximation of a target image
- mosaic show-config: Print the resolved configuration
- mosaic init-config: Write the resolved configuration to a file

Author: Mosaic Team
License: MIT
"""

from .commands import cli

__all__ = ["cli"]
