import asyncio
from collections import OrderedDict
from enum import Enum
from typing import Dict, List, Optional

import click

from publisher.artifacts import ArtifactStore, ContractBundle
from publisher.config import DeploymentConfig, Secrets
from publisher.constants import DEFAULT_VERIFICATION_DELAY
from publisher.deployer import ContractDeployer, DeploymentResult
from publisher.errors import PublisherError
from publisher.params import ConstructorParameters
from publisher.utils import get_rpc_endpoint
from publisher.verifier import SourceVerifier, VerificationOutcome


class ContractState(Enum):
    PENDING = "pending"
    DEPLOYING = "deploying"
    DEPLOYED = "deployed"
    DELAYING = "delaying"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    VERIFICATION_FAILED = "verification failed"
    FAILED = "failed"


class ContractRun:
    """Progress of one contract on one network."""

    def __init__(self, network: str, contract_name: str):
        self.network = network
        self.contract_name = contract_name
        self.state = ContractState.PENDING
        self.deployment: Optional[DeploymentResult] = None
        self.verification: Optional[VerificationOutcome] = None

    def __repr__(self) -> str:
        return f"ContractRun({self.contract_name}@{self.network}, {self.state.value})"


def _bold(text: str) -> str:
    return click.style(text, bold=True)


def _address(text: str) -> str:
    return click.style(text, fg="green", bold=True)


class DeploymentPipeline:
    """
    Deploys every contract on every network, verifying each deployment
    after a delay. Networks run concurrently; contracts within a network
    run one after the other. A failed deployment aborts the whole run, a
    failed verification is reported and skipped.
    """

    def __init__(
        self,
        bundles: Dict[str, ContractBundle],
        deployers: Dict[str, ContractDeployer],
        verifier: Optional[SourceVerifier] = None,
        constructor_parameters: Optional[ConstructorParameters] = None,
        verification_delay: float = DEFAULT_VERIFICATION_DELAY,
    ):
        if verification_delay < 0:
            raise ValueError("verification delay cannot be negative")
        self.bundles = bundles
        self.deployers = deployers
        self.verifier = verifier
        self.constructor_parameters = constructor_parameters or ConstructorParameters(
            OrderedDict()
        )
        self.verification_delay = verification_delay

    @classmethod
    def from_config(
        cls, config: DeploymentConfig, secrets: Secrets, verify: bool = True
    ) -> "DeploymentPipeline":
        store = ArtifactStore.from_config(config)
        bundles = store.load(config.contracts)
        for contract_name, bundle in bundles.items():
            config.constructor_parameters.validate(contract_name, bundle.artifact.abi)

        deployers = OrderedDict()
        for network in config.networks:
            deployers[network] = ContractDeployer.from_endpoint(
                network=network,
                endpoint=get_rpc_endpoint(network, config.rpc_endpoints),
                secrets=secrets,
                gas_price_bonus=config.gas_price_bonus,
            )

        return cls(
            bundles=bundles,
            deployers=deployers,
            verifier=SourceVerifier(secrets=secrets) if verify else None,
            constructor_parameters=config.constructor_parameters,
            verification_delay=config.verification_delay,
        )

    def run(self) -> Dict[str, List[ContractRun]]:
        return asyncio.run(self.run_async())

    async def run_async(self) -> Dict[str, List[ContractRun]]:
        networks = list(self.deployers)
        tasks = [asyncio.ensure_future(self._publish_network(network)) for network in networks]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return OrderedDict(zip(networks, results))

    async def _publish_network(self, network: str) -> List[ContractRun]:
        deployer = self.deployers[network]
        runs = list()
        for contract_name, bundle in self.bundles.items():
            run = ContractRun(network=network, contract_name=contract_name)
            runs.append(run)
            await self._deploy(run, deployer, bundle)
            if self.verifier is not None:
                await self._verify(run, deployer, bundle)
        return runs

    async def _deploy(
        self, run: ContractRun, deployer: ContractDeployer, bundle: ContractBundle
    ) -> None:
        run.state = ContractState.DEPLOYING
        click.echo(f"Deploying {_bold(run.contract_name)} on {run.network}...")
        try:
            constructor_args = self.constructor_parameters.resolve(
                run.contract_name, deployer.address
            )
            run.deployment = await asyncio.to_thread(
                deployer.deploy, bundle.artifact, list(constructor_args.values())
            )
        except (PublisherError, ValueError):
            run.state = ContractState.FAILED
            raise
        run.state = ContractState.DEPLOYED
        click.echo(
            f"Deployed {_bold(run.contract_name)} on {run.network}: "
            f"{_address(run.deployment.address)}"
        )

    async def _verify(
        self, run: ContractRun, deployer: ContractDeployer, bundle: ContractBundle
    ) -> None:
        run.state = ContractState.DELAYING
        if self.verification_delay:
            click.echo(
                f"(i) Waiting {self.verification_delay:g}s for the explorer to index "
                f"{run.contract_name} on {run.network}..."
            )
        await asyncio.sleep(self.verification_delay)

        run.state = ContractState.VERIFYING
        artifact = bundle.artifact
        try:
            constructor_arguments = self.constructor_parameters.encode(
                run.contract_name, artifact.abi, deployer.address
            )
            run.verification = await asyncio.to_thread(
                self.verifier.verify,
                network=run.network,
                address=run.deployment.address,
                contract_name=artifact.contract_name,
                compiler_input=bundle.compiler_input(),
                compiler_version=artifact.compiler_version,
                constructor_arguments=constructor_arguments,
            )
        except (PublisherError, ValueError) as e:
            run.state = ContractState.VERIFICATION_FAILED
            run.verification = VerificationOutcome(success=False, message=str(e))
            click.secho(
                f"Could not verify {run.contract_name} on {run.network}: {e}", fg="red", err=True
            )
            return

        run.state = ContractState.VERIFIED
        click.echo(
            f"Successfully verified source code for {_bold(run.contract_name)} on {run.network} "
            f"at {_address(run.deployment.address)} (ref: {run.verification.reference_id})!"
        )


def print_summary(results: Dict[str, List[ContractRun]]) -> None:
    click.echo("\nDeployment summary")
    for network, runs in results.items():
        click.echo(f"{network}:")
        for run in runs:
            address = run.deployment.address if run.deployment else "-"
            click.echo(f"\t{run.contract_name}: {address} ({run.state.value})")
