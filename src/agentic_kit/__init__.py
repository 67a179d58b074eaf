"""
agentic-kit: workstation bootstrap for agentic development.

- ``core``  settings, errors, logging, shell runner, SQL migration runner
- ``ops``   link / devel / docker-reset / migrate operations
- ``cli``   Typer front-end (``agentic-kit``)
"""

__version__ = "0.1.0"
