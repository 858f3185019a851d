"""
hangoutslots - availability consolidation and slot segmentation for hangout polls.
"""

__version__ = "0.1.0"
