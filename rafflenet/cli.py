import importlib
import os
import sys

import click

from rafflenet import network
from rafflenet.config import config


@click.group()
def cli():
    """Run raffle project scripts on a development network."""


@cli.command()
@click.argument("script")
@click.argument("function", default="main")
@click.option("--network", "network_name", default=None, help="Network to connect to.")
def run(script, function, network_name):
    """Run FUNCTION (default: main) from scripts/SCRIPT.py."""
    sys.path.insert(0, os.getcwd())
    config.load()
    module_name = script.replace("/", ".")
    if module_name.endswith(".py"):
        module_name = module_name[:-3]
    if not module_name.startswith("scripts."):
        module_name = f"scripts.{module_name}"

    network.connect(network_name)
    click.echo(f"Running '{module_name}::{function}' on {network.show_active()}")
    try:
        module = importlib.import_module(module_name)
        getattr(module, function)()
    finally:
        network.disconnect()


@cli.command()
def networks():
    """List the networks in raffle-config.yaml."""
    default = config["networks"]["default"]
    for name, settings in config["networks"].items():
        if name == "default":
            continue
        settings = settings or {}
        marker = "*" if name == default else " "
        extra = " (automation)" if settings.get("automation") else ""
        click.echo(f"{marker} {name}: chain id {settings.get('chain_id', 1337)}{extra}")


if __name__ == "__main__":
    cli()
