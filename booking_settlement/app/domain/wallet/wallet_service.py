"""
Wallet Service (Domain Logic).

Per-user, per-currency balances. Every balance change is one conditional
UPDATE plus one appended WalletTransaction inside the caller's transaction,
so balance == sum(transaction amounts) at every commit.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from booking_settlement.app.core.exceptions import (
    InsufficientFundsError, InvalidAmountError, ResourceNotFoundError
)
from booking_settlement.app.db.repositories import WalletRepository
from booking_settlement.app.models.settlement_enums import WalletTransactionType
from booking_settlement.app.models.wallet import Wallet, WalletTransaction

logger = logging.getLogger("booking_settlement.wallet")


def _require_positive(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError(amount)
    return amount


class WalletService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.wallets = WalletRepository(db)

    async def get_or_create(self, user_id: str, currency_code: str) -> Wallet:
        """Locked wallet row, created empty on first use."""
        wallet = await self.wallets.get(user_id, currency_code, for_update=True)
        if wallet is None:
            await self.wallets.insert_if_absent(user_id, currency_code)
            wallet = await self.wallets.get(user_id, currency_code, for_update=True)
        return wallet

    async def get_wallet(self, user_id: str, currency_code: str) -> Wallet:
        wallet = await self.wallets.get(user_id, currency_code)
        if wallet is None:
            raise ResourceNotFoundError("Wallet", f"{user_id}/{currency_code}")
        return wallet

    async def list_wallets(self, user_id: str) -> List[Wallet]:
        return await self.wallets.list_for_user(user_id)

    async def transactions(self, user_id: str, currency_code: str,
                           limit: Optional[int] = None) -> List[WalletTransaction]:
        wallet = await self.get_wallet(user_id, currency_code)
        return await self.wallets.list_transactions(wallet.id, limit=limit)

    async def debit(
        self,
        user_id: str,
        currency_code: str,
        amount: int,
        type: WalletTransactionType = WalletTransactionType.BOOKING_PAYMENT,
        description: str = "",
        booking_id: Optional[str] = None,
    ) -> WalletTransaction:
        """
        Take `amount` out of the wallet.

        The sufficiency check and the decrement are one statement; on
        failure nothing is written.

        Raises:
            InvalidAmountError: amount is not a positive integer
            InsufficientFundsError: balance < amount
        """
        _require_positive(amount)
        wallet = await self.get_or_create(user_id, currency_code)

        if not await self.wallets.apply_delta_if_covered(wallet.id, -amount):
            balance = await self.wallets.current_balance(wallet.id)
            logger.warning(
                "Debit of %s %s refused for user %s (balance %s)",
                amount, currency_code, user_id, balance
            )
            raise InsufficientFundsError(user_id, currency_code, balance, amount)

        return await self._record(wallet, -amount, type, description, booking_id)

    async def credit(
        self,
        user_id: str,
        currency_code: str,
        amount: int,
        type: WalletTransactionType,
        description: str = "",
        booking_id: Optional[str] = None,
    ) -> WalletTransaction:
        """Add `amount` to the wallet. No upper bound."""
        _require_positive(amount)
        wallet = await self.get_or_create(user_id, currency_code)

        await self.wallets.apply_delta(wallet.id, amount)
        return await self._record(wallet, amount, type, description, booking_id)

    async def _record(
        self,
        wallet: Wallet,
        amount: int,
        type: WalletTransactionType,
        description: str,
        booking_id: Optional[str],
    ) -> WalletTransaction:
        balance_after = await self.wallets.current_balance(wallet.id)
        transaction = await self.wallets.append_transaction(
            WalletTransaction(
                wallet_id=wallet.id,
                type=type,
                amount=amount,
                balance_after=balance_after,
                description=description,
                booking_id=booking_id,
            )
        )
        await self.db.refresh(wallet)
        logger.info(
            "Wallet %s/%s %s %s -> balance %s",
            wallet.user_id, wallet.currency_code, type.value, amount, balance_after
        )
        return transaction

    async def verify_consistency(self, user_id: str, currency_code: str) -> bool:
        """True when the stored balance equals the sum of the transaction history."""
        wallet = await self.get_wallet(user_id, currency_code)
        return wallet.balance == await self.wallets.sum_transactions(wallet.id)
