"""autolend - automated investing on a peer-to-peer loan marketplace."""

__version__ = "0.1.0"
