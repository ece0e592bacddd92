"""
rsc-quickstart: bootstrap a RedwoodJS RSC project from the kitchen-sink template.
"""

__version__ = "0.1.0"
