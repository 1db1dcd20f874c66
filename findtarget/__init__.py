"""
findtarget

Collects in-scope hostnames and URLs from Bugcrowd and HackerOne programs
and prints them one per line for further reconnaissance.

Author: findtarget Team
License: MIT
"""

__version__ = "1.0.0"
