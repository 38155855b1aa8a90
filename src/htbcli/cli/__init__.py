"""typer application exposed as the ``htb`` entry point.

Structure:
- __main__.py: Commands (list, info, join, leave, submit)
"""
