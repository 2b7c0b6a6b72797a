import json

import click

from ..models.errors import ActionClientError
from ..preview import preview_as_dict, render_preview
from ._utils._common import load_environment, load_preview_class


@click.command()
@click.argument("target")
@click.argument("action", required=False)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
def preview(target: str, action: str | None, output_format: str) -> None:
    r"""Show the request a client preview builds.

    TARGET is a preview class as 'module:PreviewClass'. Without ACTION, the
    available previews are listed.

    \b
    Examples:
        action-client preview my_app.previews:ArticlesClientPreview
        action-client preview my_app.previews:ArticlesClientPreview create
        action-client preview my_app.previews:ArticlesClientPreview create --format json
    """
    load_environment()
    preview_class = load_preview_class(target)

    if action is None:
        names = preview_class.preview_methods()
        if output_format == "json":
            click.echo(json.dumps({preview_class.preview_name: names}, indent=2))
            return
        for name in names:
            click.echo(f"{preview_class.preview_name}/{name}")
        return

    try:
        request = preview_class.call(action)
    except (LookupError, ActionClientError) as e:
        raise click.ClickException(str(e)) from e

    if output_format == "json":
        click.echo(json.dumps(preview_as_dict(request), indent=2))
    else:
        click.echo(render_preview(request), nl=False)
