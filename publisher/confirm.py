import sys
from collections import OrderedDict
from typing import Sequence

import click

from publisher.constants import ZERO_ADDRESS


def _abort() -> None:
    click.echo("Aborting deployment!")
    sys.exit(-1)


def _confirm_zero_address() -> None:
    answer = input("Zero Address detected for deployment parameter; Continue? Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_resolution(resolved_params: OrderedDict, contract_name: str) -> None:
    """Shows the resolved constructor parameters for a single contract."""
    if len(resolved_params) == 0:
        click.echo(f"(i) No constructor parameters for {contract_name}")
        return

    click.echo(f"Constructor parameters for {contract_name}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        click.echo(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = resolved_value == ZERO_ADDRESS
    if contains_zero_address:
        _confirm_zero_address()


def _confirm_deployment(networks: Sequence[str], contract_names: Sequence[str]) -> None:
    """Asks the user to confirm deploying every contract on every network."""
    click.echo(f"\nContracts: {', '.join(contract_names)}")
    click.echo(f"Networks: {', '.join(networks)}")
    answer = input(f"Deploy {len(contract_names)} contract(s) on {len(networks)} network(s) Y/N? ")
    if answer.lower().strip() == "n":
        _abort()
