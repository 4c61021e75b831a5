class PublisherError(Exception):
    """Base class for deployment and verification errors."""


class DeploymentConfigError(PublisherError, ValueError):
    """Raised when the deployment file or environment is unusable."""


class ArtifactNotFoundError(PublisherError):
    """Raised when a requested contract has no compiled output."""


class NetworkRequestError(PublisherError):
    """Raised when an RPC or explorer request fails at the transport level."""


class DeploymentFailedError(PublisherError):
    """Raised when a contract-creation receipt reports failure."""

    def __init__(self, contract_name: str, network: str, tx_hash: str = None):
        self.contract_name = contract_name
        self.network = network
        self.tx_hash = tx_hash
        message = f"failed to deploy {contract_name} on {network}"
        if tx_hash:
            message = f"{message} (tx: {tx_hash})"
        super().__init__(message)


class VerificationFailedError(PublisherError):
    """Raised when the block explorer rejects a verification request."""

    def __init__(self, message: str, result: str = None):
        self.message = message
        self.result = result
        text = f"Verification failed: {message}"
        if result:
            text = f"{text}: {result}"
        super().__init__(text)
