import json
from typing import NamedTuple, Optional

import click
import requests

from publisher.artifacts import CompilerInput
from publisher.config import Secrets
from publisher.constants import (
    APACHE_2_LICENSE_TYPE,
    CHECK_STATUS_ACTION,
    EXPLORER_HOST,
    MAINNET,
    PRIMARY_API_PREFIX,
    STANDARD_JSON_CODE_FORMAT,
    SUPPORTED_NETWORKS,
    VERIFICATION_MODULE,
    VERIFICATION_SUCCESS_STATUS,
    VERIFY_SOURCE_ACTION,
)
from publisher.errors import NetworkRequestError, VerificationFailedError
from publisher.utils import find_contract_path_spec, get_compiler_version


class VerificationOutcome(NamedTuple):
    success: bool
    message: str
    reference_id: Optional[str] = None


def get_explorer_api_url(network: str) -> str:
    """Returns the verification endpoint for a network."""
    if network not in SUPPORTED_NETWORKS:
        raise ValueError(f"No block explorer known for network '{network}'")
    prefix = PRIMARY_API_PREFIX if network == MAINNET else f"{PRIMARY_API_PREFIX}-{network}"
    return f"https://{prefix}.{EXPLORER_HOST}/api"


class SourceVerifier:
    """Submits standard-json source verification requests to an etherscan-style API."""

    def __init__(self, secrets: Secrets, session: Optional[requests.Session] = None):
        self._api_key = secrets.explorer_api_key
        self.session = session or requests.Session()

    def _post(self, network: str, params: dict) -> dict:
        url = get_explorer_api_url(network)
        try:
            response = self.session.post(url, data=params)
            response.raise_for_status()
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            raise NetworkRequestError(f"Explorer request to {url} failed: {e}") from e
        if not isinstance(result, dict):
            raise NetworkRequestError(f"Unexpected response from {url}: {result!r}")
        return result

    @staticmethod
    def _check(result: dict) -> str:
        status = str(result.get("status"))
        if status != VERIFICATION_SUCCESS_STATUS:
            raise VerificationFailedError(
                message=result.get("message", ""), result=result.get("result")
            )
        return result.get("result")

    def build_params(
        self,
        address: str,
        contract_name: str,
        compiler_input: CompilerInput,
        compiler_version: str,
        constructor_arguments: str = "",
    ) -> dict:
        path_spec = find_contract_path_spec(compiler_input.sources, contract_name)
        if path_spec is None:
            raise VerificationFailedError(
                message=f"No source path ending with {contract_name}.sol in compiler input"
            )

        params = {
            "apikey": self._api_key,
            "module": VERIFICATION_MODULE,
            "action": VERIFY_SOURCE_ACTION,
            "contractaddress": address,
            "sourceCode": json.dumps(compiler_input.to_dict()),
            "codeformat": STANDARD_JSON_CODE_FORMAT,
            "contractname": path_spec,
            "compilerversion": get_compiler_version(compiler_version),
            "licenseType": APACHE_2_LICENSE_TYPE,
        }
        if constructor_arguments:
            # the misspelling is part of the explorer API
            params["constructorArguements"] = constructor_arguments
        return params

    def verify(
        self,
        network: str,
        address: str,
        contract_name: str,
        compiler_input: CompilerInput,
        compiler_version: str,
        constructor_arguments: str = "",
    ) -> VerificationOutcome:
        """
        Submits the source of a deployed contract for verification.

        Raises VerificationFailedError when the explorer rejects the
        submission (including when the address is already verified) and
        NetworkRequestError when the explorer cannot be reached.
        """
        params = self.build_params(
            address=address,
            contract_name=contract_name,
            compiler_input=compiler_input,
            compiler_version=compiler_version,
            constructor_arguments=constructor_arguments,
        )
        click.echo(
            f"Verifying source code for {click.style(contract_name, bold=True)} "
            f"on {network} at {click.style(address, fg='green', bold=True)}..."
        )
        result = self._post(network, params)
        reference_id = self._check(result)
        return VerificationOutcome(
            success=True, message=result.get("message", ""), reference_id=reference_id
        )

    def check_status(self, network: str, reference_id: str) -> VerificationOutcome:
        """Queries the explorer once for the state of a submitted verification."""
        params = {
            "apikey": self._api_key,
            "module": VERIFICATION_MODULE,
            "action": CHECK_STATUS_ACTION,
            "guid": reference_id,
        }
        result = self._post(network, params)
        message = self._check(result)
        return VerificationOutcome(success=True, message=message, reference_id=reference_id)
