from typing import Any, NamedTuple, Optional, Sequence

import click
import requests
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from publisher.artifacts import Artifact
from publisher.config import Secrets
from publisher.constants import DEFAULT_GAS_PRICE_BONUS, RECEIPT_TIMEOUT
from publisher.errors import DeploymentFailedError, NetworkRequestError

SUCCESS_RECEIPT_STATUS = 1


class DeploymentResult(NamedTuple):
    network: str
    contract_name: str
    address: ChecksumAddress
    tx_hash: str
    status: int


class ContractDeployer:
    """
    Publishes contract-creation transactions on a single network, signed
    with the deployer key. Deployments are never retried: a retry could
    deploy and pay twice.
    """

    def __init__(
        self,
        network: str,
        web3: Web3,
        secrets: Secrets,
        gas_price_bonus: float = DEFAULT_GAS_PRICE_BONUS,
        receipt_timeout: float = RECEIPT_TIMEOUT,
    ):
        if gas_price_bonus < 0:
            raise ValueError("gas price bonus cannot be negative")
        self.network = network
        self.web3 = web3
        self.gas_price_bonus = gas_price_bonus
        self.receipt_timeout = receipt_timeout
        self._account: LocalAccount = Account.from_key(secrets.deployer_key)

    @classmethod
    def from_endpoint(
        cls, network: str, endpoint: str, secrets: Secrets, **kwargs
    ) -> "ContractDeployer":
        web3 = Web3(Web3.HTTPProvider(endpoint))
        return cls(network=network, web3=web3, secrets=secrets, **kwargs)

    @property
    def address(self) -> ChecksumAddress:
        return self._account.address

    def gas_price(self) -> int:
        """The network's suggested gas price plus the configured bonus, in wei."""
        suggested = self.web3.eth.gas_price
        return int(suggested * (1 + self.gas_price_bonus))

    def _build_transaction(self, artifact: Artifact, constructor_args: Sequence[Any]) -> dict:
        contract = self.web3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        return contract.constructor(*constructor_args).build_transaction(
            {
                "from": self.address,
                "nonce": self.web3.eth.get_transaction_count(self.address, "pending"),
                "gasPrice": self.gas_price(),
                "chainId": self.web3.eth.chain_id,
            }
        )

    def deploy(
        self, artifact: Artifact, constructor_args: Optional[Sequence[Any]] = None
    ) -> DeploymentResult:
        contract_name = artifact.contract_name
        constructor_args = list(constructor_args or [])
        try:
            transaction = self._build_transaction(artifact, constructor_args)
            signed = self._account.sign_transaction(transaction)
            tx_hash = Web3.to_hex(self.web3.eth.send_raw_transaction(signed.raw_transaction))
            click.echo(f"(i) Sent {contract_name} creation on {self.network}: {tx_hash}")
            receipt = self.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except ContractLogicError as e:
            # creation reverted during gas estimation
            raise DeploymentFailedError(contract_name, self.network) from e
        except (requests.RequestException, Web3Exception) as e:
            raise NetworkRequestError(
                f"RPC request failed while deploying {contract_name} on {self.network}: {e}"
            ) from e

        status = receipt["status"]
        if status != SUCCESS_RECEIPT_STATUS or not receipt.get("contractAddress"):
            raise DeploymentFailedError(contract_name, self.network, tx_hash=tx_hash)

        return DeploymentResult(
            network=self.network,
            contract_name=contract_name,
            address=to_checksum_address(receipt["contractAddress"]),
            tx_hash=tx_hash,
            status=status,
        )
