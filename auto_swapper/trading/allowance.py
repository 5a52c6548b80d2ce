"""
Allowance Manager - makes sure the router may pull the source token.

Approvals are unlimited (MAX_UINT256), so under the default "nonzero" policy
each token is approved at most once per wallet. The "sufficient" policy also
re-approves when the remaining allowance is below the intended trade size.
"""

from typing import Optional

from rich.console import Console

from auto_swapper.config import APPROVAL_POLICIES

console = Console()

MAX_UINT256 = 2**256 - 1


class AllowanceManager:
    def __init__(self, chain, owner: str, policy: str = "nonzero"):
        if policy not in APPROVAL_POLICIES:
            raise ValueError(f"Unknown approval policy: {policy}")
        self.chain = chain
        self.owner = owner
        self.policy = policy

    def needs_approval(self, allowance: int, required: Optional[int] = None) -> bool:
        if allowance == 0:
            return True
        if self.policy == "sufficient" and required is not None:
            return allowance < required
        # Any nonzero allowance counts as enough under "nonzero".
        return False

    def ensure_approved(self, asset: str, spender: str, symbol: str = "",
                        required: Optional[int] = None) -> bool:
        """
        Approve `spender` for `asset` if needed and wait for the receipt.

        Returns True when an approval transaction was sent. Chain errors
        propagate to the caller untouched.
        """
        allowance = self.chain.get_allowance(asset, self.owner, spender)
        if not self.needs_approval(allowance, required):
            return False

        label = symbol or asset
        console.print(f"[cyan]Approving unlimited {label}...[/cyan]")
        tx_hash = self.chain.submit_approval(asset, spender, MAX_UINT256)
        self.chain.await_confirmation(tx_hash)
        console.print(f"[green]{label} approved[/green]")
        return True
