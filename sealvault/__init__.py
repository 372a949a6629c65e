"""
sealvault - persistence identity and backup integrity for a self-custodial wallet
"""

__version__ = "0.1.0"
