"""Client version tracking.

Bump the patch for bug fixes, the minor for new commands or endpoints,
the major when the CLI surface changes incompatibly.
"""

CLIENT_VERSION = "0.1.0"
