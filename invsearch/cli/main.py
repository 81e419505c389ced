"""Main CLI application using Cyclopts.

The CLI drives the same search pipeline a UI would: triggers go through
the debounce window and the query cache before reaching the API.
"""

import cyclopts

from invsearch.cli.commands import peak, search

app = cyclopts.App(
    name="invsearch",
    help="Inventory search - CLI",
)

app.command(search.app, name="search")
app.command(peak.app, name="peak")
