"""
linerelay - LINE bot webhook that relays chat messages to an LLM.
"""

__version__ = "0.1.0"
__logo__ = "💬"
