from pathlib import Path

import publisher

#
# Filesystem
#

PUBLISHER_DIR = Path(publisher.__file__).parent
PROJECT_DIR = PUBLISHER_DIR.parent
ARTIFACTS_DIR = PROJECT_DIR / "artifacts"
INPUTS_DIRNAME = "inputs"

#
# Networks
#

MAINNET = "main"
ROPSTEN = "ropsten"
KOVAN = "kovan"

SUPPORTED_NETWORKS = [MAINNET, ROPSTEN, KOVAN]

# infura names the primary network differently
INFURA_NETWORK_NAMES = {
    MAINNET: "mainnet",
}
INFURA_ENVVAR = "WEB3_INFURA_PROJECT_ID"

#
# Secrets
#

DEPLOYER_KEY_ENVVAR = "DEPLOYER_PRIVATE_KEY"
EXPLORER_KEY_ENVVAR = "ETHERSCAN_API_KEY"

#
# Deployment
#

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

DEFAULT_GAS_PRICE_BONUS = 0.85
RECEIPT_TIMEOUT = 600  # seconds

#
# Verification
#

EXPLORER_HOST = "etherscan.io"
PRIMARY_API_PREFIX = "api"

# block explorers need the creation transaction indexed first
DEFAULT_VERIFICATION_DELAY = 90  # seconds

SOURCE_STRATEGY = "source"
STANDARD_JSON_STRATEGY = "standard-json"
COMPILER_INPUT_STRATEGIES = [SOURCE_STRATEGY, STANDARD_JSON_STRATEGY]

VERIFICATION_MODULE = "contract"
VERIFY_SOURCE_ACTION = "verifysourcecode"
CHECK_STATUS_ACTION = "checkverifystatus"
STANDARD_JSON_CODE_FORMAT = "solidity-standard-json-input"
SOLIDITY_LANGUAGE = "Solidity"

# https://etherscan.io/contract-license-types
APACHE_2_LICENSE_TYPE = 12

VERIFICATION_SUCCESS_STATUS = "1"
