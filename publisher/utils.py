import json
import os
import re
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from publisher.constants import INFURA_ENVVAR, INFURA_NETWORK_NAMES, SUPPORTED_NETWORKS
from publisher.errors import DeploymentConfigError

SOLJSON_PREFIX = "soljson-"
SOLJSON_SUFFIX = ".js"

_COMPILER_VERSION_PATTERN = re.compile(
    r"^v?(?P<version>\d+\.\d+\.\d+(?:-[0-9A-Za-z.]+)?)(?:\+commit\.(?P<commit>[0-9a-fA-F]+))?"
)


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def find_contract_path_spec(sources: Mapping[str, dict], contract_name: str) -> Optional[str]:
    """
    Returns the explorer contract path spec (`<source path>:<contract name>`) for
    the source whose path ends with `<contract name>.sol`, or None if there is none.
    """
    filename = f"{contract_name}.sol"
    for path in sources:
        if path == filename or path.endswith(f"/{filename}"):
            return f"{path}:{contract_name}"
    return None


def get_compiler_version(raw_version: str) -> str:
    """
    Trims a raw solc version into the form block explorers expect, e.g.
    'soljson-v0.6.12+commit.27d51765.js' -> 'v0.6.12+commit.27d51765'.
    """
    version = raw_version.strip()
    if version.startswith(SOLJSON_PREFIX):
        version = version[len(SOLJSON_PREFIX) :]
    if version.endswith(SOLJSON_SUFFIX):
        version = version[: -len(SOLJSON_SUFFIX)]

    match = _COMPILER_VERSION_PATTERN.match(version)
    if not match:
        raise ValueError(f"Unrecognized compiler version '{raw_version}'")

    trimmed = f"v{match.group('version')}"
    commit = match.group("commit")
    if commit:
        trimmed = f"{trimmed}+commit.{commit}"
    return trimmed


def get_rpc_endpoint(network: str, endpoints: Optional[Dict[str, str]] = None) -> str:
    """
    Returns the RPC endpoint for a network; explicitly configured endpoints
    take precedence over infura.
    """
    if network not in SUPPORTED_NETWORKS:
        raise DeploymentConfigError(f"Unsupported network '{network}'.")

    endpoints = endpoints or dict()
    endpoint = endpoints.get(network)
    if endpoint:
        return endpoint

    project_id = os.environ.get(INFURA_ENVVAR)
    if not project_id:
        raise DeploymentConfigError(
            f"No RPC endpoint configured for '{network}' and {INFURA_ENVVAR} is not set."
        )
    infura_network = INFURA_NETWORK_NAMES.get(network, network)
    return f"https://{infura_network}.infura.io/v3/{project_id}"
