# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Options shared by the sshmount commands and TOML-backed option defaults."""

import logging
import textwrap
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, TypeVar, Union

import click

import tomli
from sshmount.mounting.coerce import ensure_dict
from sshmount.mounting.notify.utils import describe_factories, Factory
from typeguard import typechecked

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.config/sshmount/config.toml"
DEFAULT_STORE_PATH = "~/.local/share/sshmount/store.json"
DEFAULT_LOG_FOLDER = "~/.local/state/sshmount"
OMEGACONF_DOTLIST_DOCS = (
    "https://omegaconf.readthedocs.io/en/2.3_branch/usage.html#from-a-dot-list"
)

store_option = click.option(
    "--store",
    type=click.Path(dir_okay=False),
    default=DEFAULT_STORE_PATH,
    show_default=True,
    help="JSON file holding the saved mount definitions.",
)

notifier_option = click.option(
    "--notifier",
    default="stdout",
    show_default=True,
    help="Where outcomes are reported. Notifiers are listed below.",
)

notifier_opts_option = click.option(
    "-o",
    "--notifier-opt",
    "notifier_opts",
    multiple=True,
    metavar="KEY=VALUE",
    help=f"Option passed to the notifier, in OmegaConf dot-list syntax ({OMEGACONF_DOTLIST_DOCS}).",
)

log_level_option = click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default="INFO",
    show_default=True,
)

log_folder_option = click.option(
    "--log-folder",
    type=click.Path(file_okay=False),
    default=DEFAULT_LOG_FOLDER,
    show_default=True,
    help="Directory for sshmount.log.",
)

stdout_option = click.option(
    "--stdout",
    is_flag=True,
    default=False,
    help="Log to stdout instead of the log folder.",
)

yes_option = click.option(
    "--yes",
    "-y",
    is_flag=True,
    default=False,
    help="Answer yes to every confirmation (deletion, forced unmount).",
)


def get_docs_for_registry(registry: Mapping[str, Factory[Any]]) -> str:
    """Notifier documentation for a command epilog. `\\b` keeps click from
    rewrapping the paragraphs.
    """
    paragraphs = describe_factories(registry).split("\n\n")
    return "\b\nNotifiers:\n\n" + "\n\n".join(
        "\b\n" + textwrap.indent(p, "  ") for p in paragraphs
    )


@typechecked
def read_config_table(path: Path, table: str) -> Dict[str, Any]:
    """Read the top-level `table` of the TOML file at `path`.

    Raises `ValueError` if the file is not TOML and `KeyError` if it has no such
    table.
    """
    with path.open("rb") as f:
        document = tomli.load(f)
    if table not in document:
        raise KeyError(
            f"'{table}' is not a top-level table name in {path}. Valid names: {list(document)}"
        )
    return ensure_dict(document[table])


def _apply_config(table: str) -> Callable[[click.Context, click.Parameter, Path], None]:
    def callback(ctx: click.Context, param: click.Parameter, value: Path) -> None:
        path = value.expanduser()
        if path == Path("/dev/null") or not path.exists():
            return
        logger.info(f"Loading option defaults from [{table}] in {path}")
        try:
            defaults = read_config_table(path, table)
        except tomli.TOMLDecodeError as e:
            raise click.BadParameter(f"{path} does not contain valid TOML.", ctx, param) from e
        except KeyError as e:
            raise click.BadParameter(e.args[0], ctx, param) from e
        # subtables become the defaults of subcommands
        ctx.default_map = {**(ctx.default_map or {}), **defaults}

    return callback


_F = TypeVar("_F", bound=Callable[..., Any])


def toml_config_option(
    table: str,
    *,
    default_config_path: Union[str, Path] = DEFAULT_CONFIG_PATH,
) -> Callable[[_F], _F]:
    """Add a `--config PATH` option whose TOML `table` supplies option defaults.

    Values given on the command line win over the file, which wins over the
    `default` of each option. Nested tables configure subcommands of a group. A
    missing file, or `/dev/null`, is ignored.
    """
    return click.option(
        "--config",
        type=click.Path(dir_okay=False, path_type=Path),
        default=default_config_path,
        show_default=True,
        is_eager=True,
        expose_value=False,
        callback=_apply_config(table),
        help=f"TOML file whose [{table}] table sets option defaults.",
    )
