#!/usr/bin/python3
import sys

import click
from eth_account import Account

from publisher.artifacts import ArtifactStore
from publisher.config import DeploymentConfig, Secrets
from publisher.errors import PublisherError
from publisher.options import (
    address_option,
    contract_name_option,
    guid_option,
    network_option,
    optional_config_option,
    strategy_option,
)
from publisher.verifier import SourceVerifier


@click.command()
@optional_config_option
@network_option
@contract_name_option
@address_option
@guid_option
@strategy_option
def cli(config_filepath, network, contract_name, address, guid, strategy):
    """Verify the source code of an already deployed contract."""
    if not guid and not (config_filepath and contract_name and address):
        raise click.BadOptionUsage(
            option_name="--guid",
            message="Provide either '--guid' or all of '--config', '--contract-name', '--address'",
        )

    secrets = Secrets.from_environment()
    try:
        secrets.check(deploy=False, verify=True)
        verifier = SourceVerifier(secrets=secrets)
        if guid:
            outcome = verifier.check_status(network=network, reference_id=guid)
            click.echo(f"Verification {guid} on {network}: {outcome.message}")
            return

        config = DeploymentConfig.from_yaml(config_filepath)
        if strategy:
            config = config._replace(strategy=strategy)
        bundle = ArtifactStore.from_config(config).load([contract_name])[contract_name]
        artifact = bundle.artifact

        # '$deployer' constructor parameters need the key that deployed the contract
        deployer_address = None
        if secrets.deployer_key:
            deployer_address = Account.from_key(secrets.deployer_key).address

        outcome = verifier.verify(
            network=network,
            address=address,
            contract_name=artifact.contract_name,
            compiler_input=bundle.compiler_input(),
            compiler_version=artifact.compiler_version,
            constructor_arguments=config.constructor_parameters.encode(
                contract_name, artifact.abi, deployer_address
            ),
        )
    except (PublisherError, ValueError) as e:
        click.secho(str(e), fg="red", err=True)
        sys.exit(-1)

    click.echo(
        f"Successfully verified source code for {contract_name} on {network} at {address} "
        f"(ref: {outcome.reference_id})!"
    )


if __name__ == "__main__":
    cli()
