import os
import typing
from collections import OrderedDict
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from publisher.constants import (
    ARTIFACTS_DIR,
    COMPILER_INPUT_STRATEGIES,
    DEFAULT_GAS_PRICE_BONUS,
    DEFAULT_VERIFICATION_DELAY,
    DEPLOYER_KEY_ENVVAR,
    EXPLORER_KEY_ENVVAR,
    SOURCE_STRATEGY,
    SUPPORTED_NETWORKS,
)
from publisher.errors import DeploymentConfigError
from publisher.params import ConstructorParameters, get_contract_names
from publisher.utils import _load_yaml


class Secrets:
    """
    Signing key and explorer API key for a run. Values are only reachable
    through attributes; the repr is masked so the object is safe to print.
    """

    MASK = "****"

    def __init__(self, deployer_key: Optional[str], explorer_api_key: Optional[str]):
        self.deployer_key = deployer_key
        self.explorer_api_key = explorer_api_key

    def __repr__(self) -> str:
        deployer_key = self.MASK if self.deployer_key else None
        explorer_api_key = self.MASK if self.explorer_api_key else None
        return f"Secrets(deployer_key={deployer_key}, explorer_api_key={explorer_api_key})"

    __str__ = __repr__

    @classmethod
    def from_environment(cls) -> "Secrets":
        return cls(
            deployer_key=os.environ.get(DEPLOYER_KEY_ENVVAR),
            explorer_api_key=os.environ.get(EXPLORER_KEY_ENVVAR),
        )

    def check(self, deploy: bool = True, verify: bool = True) -> None:
        if deploy and not self.deployer_key:
            raise DeploymentConfigError(f"{DEPLOYER_KEY_ENVVAR} is not set.")
        if verify and not self.explorer_api_key:
            raise DeploymentConfigError(f"{EXPLORER_KEY_ENVVAR} is not set.")


class DeploymentConfig(NamedTuple):
    """Everything a deployment run needs, resolved from the deployment file."""

    path: Optional[Path]
    networks: List[str]
    contracts: List[str]
    constructor_parameters: ConstructorParameters
    artifacts_dir: Path
    strategy: str
    sources_dir: Optional[Path]
    inputs_dir: Optional[Path]
    gas_price_bonus: float = DEFAULT_GAS_PRICE_BONUS
    verification_delay: float = DEFAULT_VERIFICATION_DELAY
    rpc_endpoints: Optional[Dict[str, str]] = None

    @classmethod
    def from_yaml(cls, filepath: Path) -> "DeploymentConfig":
        config = _load_yaml(filepath)
        if not isinstance(config, dict):
            raise DeploymentConfigError(f"Malformed deployment file {filepath}.")
        return cls.from_dict(config, base_dir=filepath.parent, path=filepath)

    @classmethod
    def from_dict(
        cls, config: typing.Dict, base_dir: Optional[Path] = None, path: Optional[Path] = None
    ) -> "DeploymentConfig":
        validate_config(config)
        base_dir = base_dir or Path.cwd()

        deployment = config["deployment"]
        artifacts = config.get("artifacts") or dict()

        def _path(value) -> Optional[Path]:
            if value is None:
                return None
            value = Path(value)
            return value if value.is_absolute() else base_dir / value

        return cls(
            path=path,
            networks=list(deployment["networks"]),
            contracts=get_contract_names(config),
            constructor_parameters=ConstructorParameters.from_config(config),
            artifacts_dir=_path(artifacts.get("dir")) or ARTIFACTS_DIR,
            strategy=artifacts.get("strategy", SOURCE_STRATEGY),
            sources_dir=_path(artifacts.get("sources_dir")),
            inputs_dir=_path(artifacts.get("inputs_dir")),
            gas_price_bonus=float(deployment.get("gas_price_bonus", DEFAULT_GAS_PRICE_BONUS)),
            verification_delay=float(
                deployment.get("verification_delay", DEFAULT_VERIFICATION_DELAY)
            ),
            rpc_endpoints=OrderedDict(deployment.get("rpc") or dict()),
        )


def validate_config(config: typing.Dict) -> None:
    """Checks the deployment file for the fields a run cannot do without."""
    deployment = config.get("deployment")
    if not deployment:
        raise DeploymentConfigError("deployment is not set in deployment file.")

    networks = deployment.get("networks")
    if not networks:
        raise DeploymentConfigError("networks is not set in deployment file.")
    unsupported = [network for network in networks if network not in SUPPORTED_NETWORKS]
    if unsupported:
        raise DeploymentConfigError(
            f"Unsupported network(s) {', '.join(unsupported)}; "
            f"expected any of {', '.join(SUPPORTED_NETWORKS)}."
        )

    contracts = config.get("contracts")
    if not contracts:
        raise DeploymentConfigError("Deployment file missing 'contracts' field.")

    strategy = (config.get("artifacts") or dict()).get("strategy", SOURCE_STRATEGY)
    if strategy not in COMPILER_INPUT_STRATEGIES:
        raise DeploymentConfigError(
            f"Unknown compiler input strategy '{strategy}'; "
            f"expected one of {', '.join(COMPILER_INPUT_STRATEGIES)}."
        )

    bonus = float(deployment.get("gas_price_bonus", DEFAULT_GAS_PRICE_BONUS))
    if bonus < 0:
        raise DeploymentConfigError("gas_price_bonus cannot be negative.")

    delay = float(deployment.get("verification_delay", DEFAULT_VERIFICATION_DELAY))
    if delay < 0:
        raise DeploymentConfigError("verification_delay cannot be negative.")
