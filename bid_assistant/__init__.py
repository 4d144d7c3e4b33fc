"""
Project Bid Assistant - Conversational Bid Coordination

Answers natural-language questions about a construction bidding project and
proposes structured edits to bid data, using Claude as the reasoning engine
and the project database as the source of truth.
"""

__version__ = "0.1.0"
__author__ = "Bid Assistant Team"
