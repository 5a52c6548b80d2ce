"""
Chain Client - the only place that talks to the RPC node.

Reads ERC20 balances and allowances, signs transactions locally with the
wallet key, sends them, and waits for receipts. Nothing here retries or
swallows errors; the main loop decides what to do with failures.
"""

from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3

from auto_swapper.chain.abi import ERC20_ABI, SWAP_ROUTER_ABI
from auto_swapper.config import AgentConfig


def format_tx_hash(tx_hash) -> str:
    if isinstance(tx_hash, str):
        return tx_hash
    return Web3.to_hex(tx_hash)


class TransactionFailed(RuntimeError):
    """A transaction was mined but reverted (receipt status 0)."""

    def __init__(self, tx_hash: str, receipt=None):
        super().__init__(f"Transaction {tx_hash} reverted")
        self.tx_hash = tx_hash
        self.receipt = receipt


class ChainClient:
    """
    Thin web3 adapter for one wallet.

    Every transaction is built from the contract function, stamped with the
    wallet's pending nonce and the chain id, signed with the local key, and
    broadcast raw. Gas fees are filled in by web3.
    """

    def __init__(self, w3: Web3, account: LocalAccount, receipt_timeout: float = 120):
        self.w3 = w3
        self.account = account
        self.receipt_timeout = receipt_timeout

    @classmethod
    def from_config(cls, config: AgentConfig) -> "ChainClient":
        w3 = Web3(Web3.HTTPProvider(config.rpc.rpc_url))
        account = Account.from_key(config.wallet.private_key)
        return cls(w3, account, receipt_timeout=config.receipt_timeout)

    @property
    def address(self) -> str:
        return self.account.address

    def _erc20(self, asset: str):
        return self.w3.eth.contract(address=Web3.to_checksum_address(asset), abi=ERC20_ABI)

    def get_balance(self, asset: str, account: str) -> int:
        return self._erc20(asset).functions.balanceOf(Web3.to_checksum_address(account)).call()

    def get_allowance(self, asset: str, owner: str, spender: str) -> int:
        return self._erc20(asset).functions.allowance(
            Web3.to_checksum_address(owner),
            Web3.to_checksum_address(spender),
        ).call()

    def submit_approval(self, asset: str, spender: str, amount: int) -> bytes:
        call = self._erc20(asset).functions.approve(Web3.to_checksum_address(spender), amount)
        return self._send(call)

    def submit_swap(self, router: str, instruction, gas_limit: Optional[int] = None) -> bytes:
        contract = self.w3.eth.contract(address=Web3.to_checksum_address(router), abi=SWAP_ROUTER_ABI)
        call = contract.functions.exactInputSingle(instruction.as_params())
        return self._send(call, gas_limit)

    def await_confirmation(self, tx_hash: bytes):
        """Block until the transaction is mined. Raises TransactionFailed on revert."""
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        if receipt["status"] != 1:
            raise TransactionFailed(format_tx_hash(tx_hash), receipt)
        return receipt

    def _send(self, call, gas_limit: Optional[int] = None) -> bytes:
        tx_params = {
            "from": self.account.address,
            "nonce": self.w3.eth.get_transaction_count(self.account.address, "pending"),
            "chainId": self.w3.eth.chain_id,
        }
        if gas_limit:
            tx_params["gas"] = gas_limit

        transaction = call.build_transaction(tx_params)
        signed = self.account.sign_transaction(transaction)
        return self.w3.eth.send_raw_transaction(signed.raw_transaction)
