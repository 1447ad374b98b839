"""
Leveraged trade calculator: fee-aware pricing and leverage selection.
"""
__all__ = [
    "config",
    "pricing",
    "selector",
    "curve",
    "plots",
    "feed",
    "utils",
]
