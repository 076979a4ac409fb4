"""
eventual CLI - promise engine tooling

Commands:
- eventual check - Run the end-to-end self-check scenario
- eventual version - Show version information
"""

from eventual import __version__

__all__ = ["__version__"]
