"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .articles import articles_app
from .init import init_command
from .run import run_command, serve_command
from .sources import sources_app

app = typer.Typer(
    name="udnews",
    help="UD News - RSS feed aggregator",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("serve")(serve_command)
app.add_typer(sources_app, name="sources", help="Manage RSS sources")
app.add_typer(articles_app, name="articles", help="Browse stored articles")


if __name__ == "__main__":
    app()
