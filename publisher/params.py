import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, List, Optional, Sequence

from eth_typing import ChecksumAddress
from web3.auto import w3

from publisher.constants import ZERO_ADDRESS

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"


class VariableContext:
    def __init__(
        self,
        contract_name: str,
        constants: typing.Dict[str, Any] = None,
    ):
        self.contract_name = contract_name
        self.constants = constants or dict()


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self, deployer_address: Optional[ChecksumAddress]) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """True for `$`-prefixed values."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class DeployerAccount(Variable):
    DEPLOYER_INDICATOR = "deployer"

    @classmethod
    def is_deployer(cls, value: str) -> bool:
        """Returns True if the variable is a special deployer variable."""
        return value == cls.DEPLOYER_INDICATOR

    def resolve(self, deployer_address: Optional[ChecksumAddress]) -> Any:
        if deployer_address is None:
            return ZERO_ADDRESS
        return deployer_address


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        try:
            self.constant_value = context.constants[constant_name]
        except KeyError:
            raise ConstructorParameters.Invalid(
                f"Constant '{constant_name}' not found in deployment file."
            )

    def resolve(self, deployer_address: Optional[ChecksumAddress]) -> Any:
        return self.constant_value


def _resolve_param(value: Any, deployer_address: Optional[ChecksumAddress]) -> Any:
    """Resolves a value, or each element of a list of values."""
    if isinstance(value, list):
        return [_resolve_param(v, deployer_address) for v in value]

    if isinstance(value, Variable):
        return value.resolve(deployer_address)

    return value  # literally a value


def _variable_from_value(variable: str, context: VariableContext) -> Variable:
    variable = variable.strip(Variable.VARIABLE_PREFIX)
    if DeployerAccount.is_deployer(variable):
        return DeployerAccount()
    return Constant(variable, context)


def _process_raw_value(value: Any, context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, context) for v in value]

    if Variable.is_variable(value):
        value = _variable_from_value(value, context)

    return value


def get_contract_names(config: typing.Dict) -> List[str]:
    contract_names = list()
    for contract_info in config["contracts"]:
        if isinstance(contract_info, str):
            contract_names.append(contract_info)
        elif isinstance(contract_info, dict):
            contract_names.extend(list(contract_info.keys()))
        else:
            raise ConstructorParameters.Invalid("Malformed contracts section in deployment file.")

    return contract_names


def _validate_constructor_abi_inputs(
    contract_name: str,
    abi_inputs: Sequence[typing.Dict],
    resolved_parameters: OrderedDict,
) -> None:
    """Checks count, names and types of the arguments against the constructor ABI."""
    if len(resolved_parameters) != len(abi_inputs):
        raise ConstructorParameters.Invalid(
            f"Constructor parameters length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(resolved_parameters)}."
        )

    codex = enumerate(zip(abi_inputs, resolved_parameters.items()), start=0)
    for position, (abi_input, resolved_input) in codex:
        name, value = resolved_input
        if abi_input.get("name") != name:
            raise ConstructorParameters.Invalid(
                f"{contract_name} constructor parameter '{name}' at position {position} does not "
                f"match the expected ABI name '{abi_input.get('name')}'."
            )

        if not w3.is_encodable(abi_input["type"], value):
            raise ConstructorParameters.Invalid(
                f"Constructor param name '{name}' at position {position} has a value '{value}' "
                f"whose type does not match expected ABI type '{abi_input['type']}'"
            )


def get_constructor_inputs(abi: Sequence[typing.Dict]) -> List[typing.Dict]:
    for entry in abi:
        if entry.get("type") == "constructor":
            return list(entry.get("inputs", []))
    return list()


class ConstructorParameters:
    """Constructor arguments for every contract in a deployment file."""

    class Invalid(ValueError):
        """Raised when a contract's constructor parameters do not fit its ABI"""

    def __init__(self, parameters: OrderedDict):
        self.parameters = parameters

    @classmethod
    def from_config(cls, config: typing.Dict) -> "ConstructorParameters":
        """Reads the optional constructor parameters of each listed contract."""
        contracts_config = OrderedDict()
        constants = config.get("constants")
        for contract_info in config["contracts"]:
            if isinstance(contract_info, str):
                contracts_config[contract_info] = OrderedDict()
                continue

            if not isinstance(contract_info, dict) or len(contract_info) != 1:
                raise cls.Invalid("Malformed contracts section in deployment file.")

            contract_name = list(contract_info.keys())[0]  # only one entry
            contract_data = contract_info[contract_name] or dict()
            raw_parameters = contract_data.get(CONTRACT_CONSTRUCTOR_PARAMETER_KEY) or dict()
            context = VariableContext(contract_name=contract_name, constants=constants)
            contracts_config[contract_name] = OrderedDict(
                (name, _process_raw_value(value, context)) for name, value in raw_parameters.items()
            )

        return cls(parameters=contracts_config)

    def resolve(
        self, contract_name: str, deployer_address: Optional[ChecksumAddress] = None
    ) -> OrderedDict:
        """Resolves the constructor parameters for a single contract."""
        parameters = self.parameters.get(contract_name, OrderedDict())
        resolved_params = OrderedDict()
        for name, value in parameters.items():
            resolved_params[name] = _resolve_param(value, deployer_address)
        return resolved_params

    def validate(self, contract_name: str, abi: Sequence[typing.Dict]) -> None:
        """Checks the parameters of a contract against its constructor ABI."""
        _validate_constructor_abi_inputs(
            contract_name=contract_name,
            abi_inputs=get_constructor_inputs(abi),
            resolved_parameters=self.resolve(contract_name),
        )

    def encode(
        self,
        contract_name: str,
        abi: Sequence[typing.Dict],
        deployer_address: Optional[ChecksumAddress] = None,
    ) -> str:
        """ABI-encodes the resolved arguments, as block explorers expect them (no 0x prefix)."""
        resolved_params = self.resolve(contract_name, deployer_address)
        if not resolved_params:
            return ""
        types = [abi_input["type"] for abi_input in get_constructor_inputs(abi)]
        return w3.codec.encode(types, list(resolved_params.values())).hex()
