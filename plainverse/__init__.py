"""
plainverse: resumable modernization of archaic scripture text.
"""

__version__ = "0.1.0"
