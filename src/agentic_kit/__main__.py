from agentic_kit.cli import app

app()
