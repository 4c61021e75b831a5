#!/usr/bin/python3
import sys

import click

from publisher.confirm import _confirm_deployment, _confirm_resolution
from publisher.config import DeploymentConfig, Secrets
from publisher.errors import PublisherError
from publisher.options import (
    autosign_option,
    config_option,
    delay_option,
    networks_option,
    strategy_option,
    verify_option,
)
from publisher.pipeline import DeploymentPipeline, print_summary


def _print_deployment_info(config: DeploymentConfig, deployer_address: str, verify: bool):
    click.echo(
        "\n".join(
            [
                f"Account: {deployer_address}",
                f"Config: {config.path}",
                f"Networks: {', '.join(config.networks)}",
                f"Contracts: {', '.join(config.contracts)}",
                f"Artifacts: {config.artifacts_dir} ({config.strategy})",
                f"Gas Price Bonus: {config.gas_price_bonus:.0%}",
                f"Verify: {verify}",
                f"Verification Delay: {config.verification_delay:g}s",
            ]
        )
    )


@click.command()
@config_option
@networks_option
@strategy_option
@delay_option
@verify_option
@autosign_option
def cli(config_filepath, networks, strategy, delay, verify, autosign):
    """Deploy contracts on each network and verify their source code."""
    try:
        config = DeploymentConfig.from_yaml(config_filepath)
        overrides = dict()
        if networks:
            overrides["networks"] = list(networks)
        if strategy:
            overrides["strategy"] = strategy
        if delay is not None:
            overrides["verification_delay"] = delay
        config = config._replace(**overrides)

        secrets = Secrets.from_environment()
        secrets.check(verify=verify)
        pipeline = DeploymentPipeline.from_config(config, secrets=secrets, verify=verify)

        deployer_address = next(iter(pipeline.deployers.values())).address
        _print_deployment_info(config, deployer_address, verify)
        if not autosign:
            for contract_name in config.contracts:
                resolved_params = config.constructor_parameters.resolve(
                    contract_name, deployer_address
                )
                _confirm_resolution(resolved_params, contract_name)
            _confirm_deployment(config.networks, config.contracts)
        else:
            click.echo("WARNING: Autosign is enabled. Transactions will be signed automatically.")

        results = pipeline.run()
    except (PublisherError, ValueError) as e:
        click.secho(f"Deployment aborted: {e}", fg="red", err=True)
        sys.exit(-1)

    print_summary(results)


if __name__ == "__main__":
    cli()
