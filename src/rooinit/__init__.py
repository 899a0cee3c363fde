"""
rooinit - Roo project initializer

Provisions a project directory with selected modes and their rule files,
drawn from a bundled system catalog and an optional user override catalog.
"""

__version__ = "1.0.0"
__author__ = "rooinit contributors"
