"""CLI entrypoint: Typer app definition and command registration"""

import typer

from blogpub.cli.commands import (
    confirm_cmd, create_cmd, delete_cmd, init_cmd, list_cmd,
    profile_cmd, publish_cmd, save_cmd, show_cmd, tags_cmd, upload_cmd,
)


app = typer.Typer(name="blogpub", no_args_is_help=True, help="Multi-tenant blog publishing")

app.command(name="init")(init_cmd)
app.command(name="create")(create_cmd)
app.command(name="save")(save_cmd)
app.command(name="publish")(publish_cmd)
app.command(name="delete")(delete_cmd)
app.command(name="tags")(tags_cmd)
app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)
app.command(name="confirm")(confirm_cmd)
app.command(name="upload")(upload_cmd)
app.command(name="profile")(profile_cmd)
