import json
from unittest.mock import MagicMock

import pytest
import requests

from publisher.artifacts import Artifact, ContractBundle
from publisher.config import Secrets
from publisher.deployer import ContractDeployer, DeploymentResult
from publisher.errors import DeploymentFailedError

# Common constants
# first account of the hardhat/anvil development mnemonic
DEPLOYER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEPLOYER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
EXPLORER_API_KEY = "TESTAPIKEY"

RAW_COMPILER_VERSION = "soljson-v0.6.12+commit.27d51765.js"
COMPILER_SETTINGS = {
    "optimizer": {"enabled": True, "runs": 1000000},
    "evmVersion": "istanbul",
    "remappings": ["@0x/contracts-utils=/home/builder/node_modules/@0x/contracts-utils"],
    "outputSelection": {"*": {"*": ["abi", "evm.bytecode.object"]}},
}

MAIN_API_URL = "https://api.etherscan.io/api"
ROPSTEN_API_URL = "https://api-ropsten.etherscan.io/api"

CONTRACT_ADDRESS = "0xABC0000000000000000000000000000000000ABC"
VERIFICATION_GUID = "ezq878u486pzijkvvmerl6a9mzwhv6sefgvqi5tkwceejc7tvn"


# Utility functions
def artifact_data(contract_name, constructor_inputs=None, embedded_source=None):
    abi = [
        {
            "type": "function",
            "name": "bridgeTransferFrom",
            "inputs": [],
            "outputs": [{"name": "success", "type": "bytes4"}],
            "stateMutability": "nonpayable",
        }
    ]
    if constructor_inputs is not None:
        abi.insert(
            0,
            {"type": "constructor", "inputs": constructor_inputs, "stateMutability": "nonpayable"},
        )
    data = {
        "schemaVersion": "2.0.0",
        "contractName": contract_name,
        "compilerOutput": {
            "abi": abi,
            "evm": {"bytecode": {"object": "0x608060405234801561001057600080fd5b50"}},
        },
        "compiler": {
            "name": "solc",
            "version": RAW_COMPILER_VERSION,
            "settings": COMPILER_SETTINGS,
        },
    }
    if embedded_source is not None:
        data["sourceCodes"] = {f"src/bridges/{contract_name}.sol": embedded_source}
    return data


def contract_source(contract_name):
    return f"pragma solidity ^0.6.12;\n\ncontract {contract_name} {{}}\n"


def explorer_response(status, message, result):
    response = MagicMock(spec=requests.Response)
    response.json.return_value = {"status": status, "message": message, "result": result}
    return response


def make_session(responses):
    """A requests session that answers each explorer url with a canned response."""
    session = MagicMock(spec=requests.Session)

    def post(url, data=None):
        return responses[url]

    session.post.side_effect = post
    return session


def make_deployer(network, fail_on=()):
    """A deployer that reports every creation as mined at CONTRACT_ADDRESS."""
    deployer = MagicMock(spec=ContractDeployer)
    deployer.network = network
    deployer.address = DEPLOYER_ADDRESS

    def deploy(artifact, constructor_args=None):
        if artifact.contract_name in fail_on:
            raise DeploymentFailedError(artifact.contract_name, network)
        return DeploymentResult(
            network=network,
            contract_name=artifact.contract_name,
            address=CONTRACT_ADDRESS,
            tx_hash="0x" + "ab" * 32,
            status=1,
        )

    deployer.deploy.side_effect = deploy
    return deployer


# Fixtures
@pytest.fixture
def secrets():
    return Secrets(deployer_key=DEPLOYER_KEY, explorer_api_key=EXPLORER_API_KEY)


@pytest.fixture
def artifacts_dir(tmp_path):
    artifacts = tmp_path / "artifacts"
    artifacts.mkdir()
    sources = tmp_path / "sources"
    sources.mkdir()
    inputs = artifacts / "inputs"
    inputs.mkdir()

    for name in ("Foo", "Bar"):
        (artifacts / f"{name}.json").write_text(json.dumps(artifact_data(name)))
        (sources / f"{name}.sol").write_text(contract_source(name))
        compiler_input = {
            "language": "Solidity",
            "sources": {f"contracts/src/{name}.sol": {"content": contract_source(name)}},
            "settings": {"optimizer": {"enabled": True, "runs": 1000000}},
        }
        (inputs / f"{name}.json").write_text(json.dumps(compiler_input))

    return artifacts


@pytest.fixture
def foo_bundle():
    artifact = Artifact.from_dict(artifact_data("Foo"), contract_name="Foo")
    return ContractBundle(artifact=artifact, source=contract_source("Foo"))
