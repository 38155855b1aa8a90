"""Command-line client for the Hack The Box v4 API.

Structure:
- htbcli/config.py: Settings via pydantic-settings (HTB_API_KEY, CS_OPT)
- htbcli/errors.py: Exception hierarchy
- htbcli/models.py: Machine model and its enums
- htbcli/client.py: Authenticated HTTP wrapper around httpx
- htbcli/api.py: Named API operations (list, profile, join, leave, own)
- htbcli/lab.py: Local lab directory and eval exports
- htbcli/cli/: typer application (``htb`` entry point)
"""

from htbcli.version import CLIENT_VERSION

__version__ = CLIENT_VERSION
