import typing
from typing import Any, List, Optional

from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractTransactionHandler
from ape_accounts import KeyfileAccount
from ethpm_types import MethodABI
from web3.auto import w3

from deployment.confirm import _continue


def _validate_method_args(
    method_abis: List[MethodABI], args: typing.Sequence[Any]
) -> typing.Dict[str, Any]:
    """Validates the transaction arguments against the function ABI."""
    if len(method_abis) == 0:
        raise ValueError("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = {}
        for arg, abi_input in zip(args, abi.inputs):
            if not w3.is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name] = arg
        else:
            return named_args
    raise ValueError(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


class Transactor:
    """
    Represents an ape account plus validated/annotated transaction execution.
    """

    def __init__(self, account: Optional[AccountAPI] = None, autosign: bool = False):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        if isinstance(self._account, KeyfileAccount):
            self._account.set_autosign(autosign)

    @property
    def address(self):
        return self._account.address

    def transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        named_args = _validate_method_args(method_abis=method.abis, args=args)
        base_message = (
            f"\nTransacting {method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method}"
            f" from {self._account.address[:10]}"
        )
        if named_args:
            pretty_args = "\n\t".join(f"{k}={v}" for k, v in named_args.items())
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        print(message)
        if not self._autosign:
            _continue()

        return method(*args, sender=self._account)
