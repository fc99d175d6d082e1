"""
Kafka channel controller: dispatcher deployment reconciliation.
"""

__version__ = "0.1.0"
