from pathlib import Path

import click

from publisher.constants import COMPILER_INPUT_STRATEGIES, SUPPORTED_NETWORKS
from publisher.types import ChecksumAddress, Seconds

config_option = click.option(
    "--config",
    "-c",
    "config_filepath",
    help="Deployment YAML file",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

networks_option = click.option(
    "--network",
    "-n",
    "networks",
    help="Network to deploy on; overrides the networks of the deployment file.",
    type=click.Choice(SUPPORTED_NETWORKS),
    multiple=True,
    required=False,
)

network_option = click.option(
    "--network",
    "-n",
    help="Network the contract is deployed on",
    type=click.Choice(SUPPORTED_NETWORKS),
    required=True,
)

strategy_option = click.option(
    "--strategy",
    "-s",
    help="How the compiler input for verification is obtained.",
    type=click.Choice(COMPILER_INPUT_STRATEGIES),
    required=False,
)

delay_option = click.option(
    "--delay",
    help="Seconds to wait before verifying a deployment, e.g. 90 or 20s.",
    type=Seconds(),
    required=False,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Verify deployed contracts on the block explorer.",
    default=True,
    show_default=True,
)

autosign_option = click.option(
    "--autosign",
    "-y",
    help="Skip confirmation prompts.",
    is_flag=True,
    default=False,
)

contract_name_option = click.option(
    "--contract-name",
    help="Contract to verify",
    type=click.STRING,
    required=False,
)

address_option = click.option(
    "--address",
    "-a",
    help="Address of the deployed contract",
    type=ChecksumAddress(),
    required=False,
)

guid_option = click.option(
    "--guid",
    "-g",
    help="Reference id of a submitted verification; only its status is queried.",
    type=click.STRING,
    required=False,
)

optional_config_option = click.option(
    "--config",
    "-c",
    "config_filepath",
    help="Deployment YAML file; locates the artifacts of the contract.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)
