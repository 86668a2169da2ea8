import os
import sys
from typing import Annotated as Ann
from typing import Optional, Tuple

import typer
from rich.console import Console
from typer import Argument as Arg

from storageiam.config import ConfigVariable, get_user_config, get_user_config_path

from .config_variables import config_variables

app = typer.Typer(
    name='config',
    no_args_is_help=True,
    help='Manage storageiam configuration.',
    pretty_exceptions_show_locals=False,
)

outc = Console(soft_wrap=True)
errc = Console(stderr=True, soft_wrap=True)


def get_section_key_path(parameter: str) -> Tuple[str, str]:
    path = parameter.split('/')
    if len(path) == 1:
        return 'global', path[0]
    if len(path) == 2:
        return path[0], path[1]
    errc.print(
        """
Parameters must contain at most one slash separating the configuration section
from the configuration parameter, for example: "storage/base_path".

Parameters may also have no slashes, indicating the parameter is a global
parameter, for example: "user_agent".
""".lstrip('\n'),
    )
    sys.exit(1)


def complete_config_variable(incomplete: str):
    for var, var_info in config_variables().items():
        if var.value.startswith(incomplete):
            yield (var.value, var_info.help_msg)


def _write_config(config) -> None:
    config_file = get_user_config_path()
    try:
        f = open(config_file, 'w', encoding='utf-8')
    except FileNotFoundError:
        os.makedirs(config_file.parent, exist_ok=True)
        f = open(config_file, 'w', encoding='utf-8')
    with f:
        config.write(f)


@app.command()
def set(
    parameter: Ann[ConfigVariable, Arg(help="Configuration variable to set", autocompletion=complete_config_variable)],
    value: str,
):
    """Set a storageiam configuration parameter."""
    validation_func, error_msg = config_variables()[parameter].validation
    if not validation_func(value):
        errc.print(f"Error: bad value {value!r} for parameter {parameter.value!r} {error_msg}")
        sys.exit(1)

    section, key = get_section_key_path(parameter.value)
    config = get_user_config()
    if section not in config:
        config[section] = {}
    config[section][key] = value
    _write_config(config)


@app.command()
def unset(parameter: Ann[str, Arg(help="Configuration variable to unset")]):
    """Unset a storageiam configuration parameter (restore to default behavior)."""
    config = get_user_config()
    section, key = get_section_key_path(parameter)
    if section in config and key in config[section]:
        del config[section][key]
        _write_config(config)
    else:
        errc.print(f"WARNING: Unknown parameter {parameter!r}")


@app.command()
def get(parameter: Ann[str, Arg(help="Configuration variable to get")]):
    """Get the value of a storageiam configuration parameter."""
    config = get_user_config()
    section, key = get_section_key_path(parameter)
    if section in config and key in config[section]:
        outc.print(config[section][key])


@app.command(name='config-location')
def config_location():
    """Print the location of the config file."""
    outc.print(f'Default settings: {get_user_config_path()}')


@app.command(name='list')
def list_config(section: Ann[Optional[str], Arg(show_default='all sections')] = None):
    """Lists every config variable in the section."""
    config = get_user_config()

    output = []
    for section_name, options in config.items():
        if section is not None and section_name != section:
            continue
        for option, value in options.items():
            output.append(f'{section_name}/{option}={value}')

    if output:
        outc.print(f'Config settings from {get_user_config_path()}:')
        for line in output:
            outc.print(line, highlight=False)
