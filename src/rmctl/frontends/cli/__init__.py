"""CLI frontend for rmctl.

Run one command and exit, or start the interactive interpreter:

Example:
    $ rmctl show partitions
    $ rmctl update NodeName=lx[10-20] State=DRAIN Reason="rack power work"
    $ rmctl -o show jobs 42
    $ rmctl
    rmctl: ping
    rmctl: exit
"""

from rmctl.frontends.cli.main import main

__all__ = ["main"]
