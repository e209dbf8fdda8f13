"""
Rusunawa booking core: tenant verification, reservation pricing and the
booking wizard.
"""

__version__ = "1.0.0"
