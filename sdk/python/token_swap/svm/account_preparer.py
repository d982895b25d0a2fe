import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from solana.constants import SYSTEM_PROGRAM_ID
from solana.rpc.async_api import AsyncClient
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID, WRAPPED_SOL_MINT
from token_swap.models.base import InvalidAccountException
from token_swap.svm import token_program
from token_swap.svm.token_utils import (
    TOKEN_ACCOUNT_LEN,
    create_associated_token_account,
    create_token_account,
    decode_token_account,
    get_ata,
)

logger = logging.getLogger(__name__)


@dataclass
class AccountInstructions:
    """
    Attributes:
        account: The account to use as the swap endpoint.
        instructions: Instructions to run before the swap.
        cleanup_instructions: Instructions to run after the swap, in the same transaction.
        signers: Keypairs introduced by this leg that must sign the transaction.
        new_wallet_pubkey: The address of a token account created for the user, if any.
        secret_key: The secret of a freshly created account, if any.
    """

    account: Pubkey
    instructions: List[Instruction] = field(default_factory=list)
    cleanup_instructions: List[Instruction] = field(default_factory=list)
    signers: List[Keypair] = field(default_factory=list)
    new_wallet_pubkey: Optional[str] = None
    secret_key: Optional[bytes] = None


class AccountPreparer:
    def __init__(
        self,
        connection: AsyncClient,
        keypair_factory: Callable[[], Keypair] = Keypair,
    ):
        self._connection = connection
        self._keypair_factory = keypair_factory

    async def prepare_source_account_and_instructions(
        self, source: Pubkey, amount: int, fee_payer: Pubkey
    ) -> AccountInstructions:
        """
        Resolves the account the swap spends from.
        Token accounts holding a regular token are used as they are. Native SOL, either
        held by a wallet or by a wrapped SOL account, is moved into a temporary wrapped
        SOL account that is closed back to the fee payer after the swap.
        Args:
            source: The account the user spends from
            amount: The amount of lamports or tokens to swap
            fee_payer: Who pays for and receives back the temporary account
        """
        if await self._is_native(source):
            return await self.prepare_for_creating_temp_account_and_close(
                amount=amount, payer=fee_payer
            )
        return AccountInstructions(account=source)

    async def _is_native(self, source: Pubkey) -> bool:
        resp = await self._connection.get_account_info(source)
        info = resp.value
        if info is None:
            raise InvalidAccountException("Source account is not valid")
        if info.owner == SYSTEM_PROGRAM_ID:
            return True
        if info.owner != TOKEN_PROGRAM_ID or len(info.data) != TOKEN_ACCOUNT_LEN:
            raise InvalidAccountException("Source account is not valid")
        return decode_token_account(info.data)["is_native"]

    async def prepare_destination_account_and_instructions(
        self,
        my_account: Pubkey,
        destination: Optional[Pubkey],
        destination_mint: Pubkey,
        fee_payer: Pubkey,
    ) -> AccountInstructions:
        """
        Resolves the account the swap pays into.
        An explicit token account is used as it is. Otherwise the user's associated
        token account for the mint is used, created if needed, and closed after the
        swap when it holds wrapped SOL.
        Args:
            my_account: The user's wallet
            destination: The token account to receive the swap output, if known
            destination_mint: The mint the user receives
            fee_payer: Who pays for the associated token account creation
        """
        if destination is not None and destination != my_account:
            return AccountInstructions(account=destination)

        return await self.prepare_for_creating_associated_token_account_and_close_if_native(
            owner=my_account, mint=destination_mint, fee_payer=fee_payer
        )

    async def prepare_for_creating_temp_account_and_close(
        self, amount: int, payer: Pubkey
    ) -> AccountInstructions:
        """
        Returns the instructions to create, fund and close a temporary wrapped SOL account.
        Args:
            amount: Lamports to deposit on top of the rent exempt minimum
            payer: Who funds and owns the account, and receives the lamports on close
        """
        minimum_balance = (
            await self._connection.get_minimum_balance_for_rent_exemption(
                TOKEN_ACCOUNT_LEN
            )
        ).value
        new_account = self._keypair_factory()
        logger.debug("Using temporary wrapped SOL account %s", new_account.pubkey())

        return AccountInstructions(
            account=new_account.pubkey(),
            instructions=[
                create_token_account(
                    from_pubkey=payer,
                    new_account=new_account.pubkey(),
                    lamports=amount + minimum_balance,
                ),
                token_program.initialize_account(
                    account=new_account.pubkey(),
                    mint=WRAPPED_SOL_MINT,
                    owner=payer,
                ),
            ],
            cleanup_instructions=[
                token_program.close_account(
                    account=new_account.pubkey(),
                    destination=payer,
                    owner=payer,
                )
            ],
            signers=[new_account],
            secret_key=bytes(new_account),
        )

    async def prepare_for_creating_associated_token_account_and_close_if_native(
        self, owner: Pubkey, mint: Pubkey, fee_payer: Pubkey
    ) -> AccountInstructions:
        associated_address = get_ata(owner, mint)

        is_registered = await self._is_registered(associated_address, owner)

        cleanup_instructions = []
        if mint == WRAPPED_SOL_MINT:
            cleanup_instructions = [
                token_program.close_account(
                    account=associated_address, destination=owner, owner=owner
                )
            ]

        if is_registered:
            return AccountInstructions(
                account=associated_address,
                cleanup_instructions=cleanup_instructions,
            )

        logger.info("Creating associated token account %s", associated_address)
        return AccountInstructions(
            account=associated_address,
            instructions=[
                create_associated_token_account(
                    payer=fee_payer, owner=owner, mint=mint
                )
            ],
            cleanup_instructions=cleanup_instructions,
            new_wallet_pubkey=str(associated_address),
        )

    async def _is_registered(self, associated_address: Pubkey, owner: Pubkey) -> bool:
        resp = await self._connection.get_account_info(associated_address)
        info = resp.value
        if info is None:
            return False
        if (
            info.owner == TOKEN_PROGRAM_ID
            and len(info.data) == TOKEN_ACCOUNT_LEN
            and decode_token_account(info.data)["owner"] == owner
        ):
            return True
        raise InvalidAccountException(
            "Associated token account belongs to another user"
        )
