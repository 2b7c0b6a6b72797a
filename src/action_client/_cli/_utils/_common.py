import importlib
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from ...preview import ActionClientPreview

DOTENV_FILE = ".env"


def add_cwd_to_path():
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)


def load_environment() -> None:
    """Load ``.env`` from the working directory so client modules can read it."""
    dotenv_path = Path.cwd() / DOTENV_FILE
    if dotenv_path.is_file():
        load_dotenv(dotenv_path, override=False)


def load_preview_class(target: str) -> type[ActionClientPreview]:
    """Import ``module:ClassName`` and check that it is a preview class."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise click.BadParameter(
            f"'{target}' is not of the form 'module:PreviewClass'",
            param_hint="TARGET",
        )

    add_cwd_to_path()
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.ClickException(f"Could not import '{module_name}': {e}") from e

    preview_class = getattr(module, class_name, None)
    if not (
        isinstance(preview_class, type)
        and issubclass(preview_class, ActionClientPreview)
    ):
        raise click.ClickException(
            f"'{target}' is not an ActionClientPreview subclass"
        )
    return preview_class
