import asyncio
import logging
import math
from fractions import Fraction
from typing import Callable, List, Tuple

from solana.rpc.async_api import AsyncClient
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction
from spl.token.constants import WRAPPED_SOL_MINT
from token_swap.client import FeeRelayerProxy
from token_swap.constants import (
    RELAY_SIGNATURE_ALLOWANCE,
    RELAY_SLIPPAGE,
    SWAP_CONFIGS,
)
from token_swap.models import RelayedSwapParams, SwapResponse
from token_swap.models.base import (
    FeePayerUnavailableException,
    InvalidPoolException,
    PoolNotFoundException,
    TransactionSimulationException,
    UnauthorizedException,
)
from token_swap.svm import token_program
from token_swap.svm.account_preparer import AccountInstructions, AccountPreparer
from token_swap.svm.generated.token_swap.accounts import TokenSwap
from token_swap.svm.generated.token_swap.accounts.token_swap import SWAP_VERSION
from token_swap.svm.generated.token_swap.errors import from_logs
from token_swap.svm.generated.token_swap.instructions import swap
from token_swap.svm.pool import (
    Pool,
    get_pool_authority,
    matched_pool,
    minimum_receive_amount,
    required_input_amount,
)
from token_swap.svm.token_utils import TOKEN_ACCOUNT_LEN

logger = logging.getLogger(__name__)


class TokenSwapClient:
    def __init__(
        self,
        connection: AsyncClient,
        network: str = "mainnet-beta",
        account: Keypair | None = None,
        keypair_factory: Callable[[], Keypair] = Keypair,
    ):
        """
        Args:
            connection: The RPC client used for every chain read and for broadcasting.
            network: The network name, one of the keys of SWAP_CONFIGS.
            account: The default wallet signing swaps.
            keypair_factory: Generates the temporary accounts and transfer authorities.
        """
        if network not in SWAP_CONFIGS:
            raise ValueError(f"Network {network} not supported")
        self._connection = connection
        self.swap_program_id = SWAP_CONFIGS[network]["swap_program"]
        self.account = account
        self._keypair_factory = keypair_factory
        self.account_preparer = AccountPreparer(connection, keypair_factory)

    async def swap(
        self,
        source: Pubkey,
        source_mint: Pubkey,
        destination_mint: Pubkey,
        slippage: float,
        amount: int,
        account: Keypair | None = None,
        pool: Pool | None = None,
        destination: Pubkey | None = None,
        is_simulation: bool = False,
        custom_proxy: FeeRelayerProxy | None = None,
    ) -> SwapResponse:
        """
        Swaps tokens through a token swap pool, directly or through a fee relayer.

        Args:
            source: The account to spend from, a token account or the wallet itself for native SOL.
            source_mint: The mint the user sells.
            destination_mint: The mint the user buys.
            slippage: The tolerated fraction of the expected output to lose.
            amount: The amount of source token to swap.
            account: The wallet signing the swap, defaults to the client's account.
            pool: A pool to use if it trades source_mint for destination_mint.
            destination: The account to receive into, defaults to the associated token account.
            is_simulation: Simulate the transaction instead of broadcasting it.
                Ignored when the swap goes through custom_proxy, which always broadcasts.
            custom_proxy: A fee relayer paying the transaction fees. The relayer only
                receives the keypair of its own wrapped SOL account, so a temporary
                source account created here is not forwarded with the request.
        Returns:
            The transaction signature and the associated token account created for the user, if any.
        """
        owner = account or self.account
        if owner is None:
            raise UnauthorizedException("No account available to sign the swap")

        # the relayer only handles token accounts, not native SOL held by the wallet
        proxy = custom_proxy
        if source == owner.pubkey() or destination == owner.pubkey():
            proxy = None

        pool, fee_payer = await asyncio.gather(
            self._resolve_pool(pool, source_mint, destination_mint),
            self._resolve_fee_payer(proxy, owner),
        )
        logger.info("Swapping %d through pool %s", amount, pool.address)

        source_account_instructions, destination_account_instructions = (
            await asyncio.gather(
                self.account_preparer.prepare_source_account_and_instructions(
                    source=source, amount=amount, fee_payer=fee_payer
                ),
                self.account_preparer.prepare_destination_account_and_instructions(
                    my_account=owner.pubkey(),
                    destination=destination,
                    destination_mint=destination_mint,
                    fee_payer=fee_payer,
                ),
            )
        )

        instructions: List[Instruction] = []
        cleanup_instructions: List[Instruction] = []

        instructions.extend(source_account_instructions.instructions)
        cleanup_instructions.extend(source_account_instructions.cleanup_instructions)

        instructions.extend(destination_account_instructions.instructions)
        cleanup_instructions.extend(
            destination_account_instructions.cleanup_instructions
        )
        new_wallet_pubkey = destination_account_instructions.new_wallet_pubkey

        user_transfer_authority: Keypair | None = None
        if proxy is None:
            user_transfer_authority = self._keypair_factory()
            instructions.append(
                token_program.approve(
                    account=source_account_instructions.account,
                    delegate=user_transfer_authority.pubkey(),
                    owner=owner.pubkey(),
                    amount=amount,
                )
            )

        instructions.append(
            self.swap_instruction(
                pool=pool,
                source=source_account_instructions.account,
                destination=destination_account_instructions.account,
                user_transfer_authority=(
                    user_transfer_authority.pubkey()
                    if user_transfer_authority is not None
                    else owner.pubkey()
                ),
                amount=amount,
                slippage=slippage,
            )
        )

        if proxy is not None:
            transaction_id = await self._swap_proxy_send_transaction(
                proxy=proxy,
                owner=owner,
                fee_payer=fee_payer,
                pool=pool,
                source=source,
                destination=destination or owner.pubkey(),
                amount=amount,
                destination_account_instructions=destination_account_instructions,
                slippage=slippage,
                instructions=instructions,
                cleanup_instructions=cleanup_instructions,
            )
        else:
            signers = [owner, user_transfer_authority]
            signers.extend(source_account_instructions.signers)
            signers.extend(destination_account_instructions.signers)
            transaction_id = await self.serialize_and_send_with_fee(
                instructions=instructions + cleanup_instructions,
                signers=signers,
                is_simulation=is_simulation,
            )

        return SwapResponse(
            transaction_id=transaction_id, new_wallet_pubkey=new_wallet_pubkey
        )

    async def _resolve_pool(
        self, pool: Pool | None, source_mint: Pubkey, destination_mint: Pubkey
    ) -> Pool:
        if (
            pool is None
            or pool.swap_data.mint_a != source_mint
            or pool.swap_data.mint_b != destination_mint
        ):
            pool = await self.get_matched_pool(source_mint, destination_mint)
        return await self.get_pool_with_token_balances(pool)

    async def _resolve_fee_payer(
        self, proxy: FeeRelayerProxy | None, owner: Keypair
    ) -> Pubkey:
        if proxy is None:
            return owner.pubkey()
        return Pubkey.from_string(await proxy.get_fee_payer())

    async def get_swap_pools(self) -> List[Pool]:
        """
        Returns every initialized pool of the swap program, without reserve balances.
        """
        resp = await self._connection.get_program_accounts(
            self.swap_program_id,
            commitment=None,
            encoding="base64",
            data_slice=None,
            filters=[TokenSwap.size()],
        )

        pools: List[Pool] = []
        for value in resp.value:
            data = value.account.data
            if data[0] != SWAP_VERSION:
                continue
            swap_data = TokenSwap.decode(data)
            if not swap_data.is_initialized:
                continue
            pools.append(
                Pool(
                    address=value.pubkey,
                    swap_program=self.swap_program_id,
                    swap_data=swap_data,
                    authority=get_pool_authority(
                        value.pubkey, swap_data.bump_seed, self.swap_program_id
                    ),
                )
            )
        return pools

    async def get_pool(self, address: Pubkey) -> Pool:
        swap_data = await TokenSwap.fetch(
            self._connection, address, program_id=self.swap_program_id
        )
        if swap_data is None:
            raise PoolNotFoundException(f"Pool {address} not found")
        return Pool(
            address=address,
            swap_program=self.swap_program_id,
            swap_data=swap_data,
            authority=get_pool_authority(
                address, swap_data.bump_seed, self.swap_program_id
            ),
        )

    async def get_matched_pool(
        self, source_mint: Pubkey, destination_mint: Pubkey
    ) -> Pool:
        pools = await self.get_swap_pools()
        pool = matched_pool(pools, source_mint, destination_mint)
        if pool is None:
            raise PoolNotFoundException(
                f"Unsupported swapping tokens {source_mint} -> {destination_mint}"
            )
        logger.debug(
            "Matched pool %s for %s -> %s", pool.address, source_mint, destination_mint
        )
        return pool

    async def get_pool_with_token_balances(self, pool: Pool) -> Pool:
        """
        Loads the current reserve balances of the pool.
        """
        token_a_resp, token_b_resp = await asyncio.gather(
            self._connection.get_token_account_balance(pool.swap_data.token_account_a),
            self._connection.get_token_account_balance(pool.swap_data.token_account_b),
        )
        return pool.with_balances(
            int(token_a_resp.value.amount), int(token_b_resp.value.amount)
        )

    def swap_instruction(
        self,
        pool: Pool,
        source: Pubkey,
        destination: Pubkey,
        user_transfer_authority: Pubkey,
        amount: int,
        slippage: float,
        minimum_amount_out: int | None = None,
    ) -> Instruction:
        min_amount_out = minimum_amount_out
        if min_amount_out is None:
            min_amount_out = minimum_receive_amount(
                pool, amount, slippage, include_fees=True
            )
        if pool.authority is None or min_amount_out is None:
            raise InvalidPoolException(f"Swap pool {pool.address} is not valid")

        return swap(
            {"amount_in": amount, "minimum_amount_out": min_amount_out},
            {
                "swap": pool.address,
                "authority": pool.authority,
                "user_transfer_authority": user_transfer_authority,
                "source": source,
                "swap_source": pool.swap_data.token_account_a,
                "swap_destination": pool.swap_data.token_account_b,
                "destination": destination,
                "pool_mint": pool.swap_data.token_pool,
                "pool_fee": pool.swap_data.fee_account,
                "host_fee_account": None,
            },
            program_id=pool.swap_program,
            token_program_id=pool.swap_data.token_program_id,
        )

    async def serialize_and_send_with_fee(
        self,
        instructions: List[Instruction],
        signers: List[Keypair],
        is_simulation: bool = False,
    ) -> str:
        """
        Signs the instructions with the first signer paying the fee, then broadcasts
        or simulates the transaction.

        Returns:
            The transaction signature.
        """
        recent_blockhash = (await self._connection.get_latest_blockhash()).value.blockhash
        transaction = Transaction.new_signed_with_payer(
            instructions, signers[0].pubkey(), signers, recent_blockhash
        )

        if is_simulation:
            resp = await self._connection.simulate_transaction(transaction)
            if resp.value.err is not None:
                logs = resp.value.logs or []
                raise TransactionSimulationException(
                    resp.value.err,
                    logs,
                    from_logs(logs, str(self.swap_program_id)),
                )
            logger.info("Simulated swap transaction %s", transaction.signatures[0])
            return str(transaction.signatures[0])

        resp = await self._connection.send_raw_transaction(bytes(transaction))
        logger.info("Sent swap transaction %s", resp.value)
        return str(resp.value)

    async def get_lamports_per_signature(
        self, payer: Pubkey, recent_blockhash: Hash
    ) -> int:
        message = Message.new_with_blockhash([], payer, recent_blockhash)
        resp = await self._connection.get_fee_for_message(message)
        return resp.value or 0

    @staticmethod
    def get_signature_for_proxy(
        owner: Keypair,
        fee_payer: Pubkey,
        instructions: List[Instruction],
        recent_blockhash: Hash,
    ) -> Signature:
        """
        Signs the transaction the relayer will complete, with the relayer paying the fee.

        Returns:
            The owner's signature over the transaction.
        """
        transaction = Transaction.new_with_payer(instructions, fee_payer)
        transaction.partial_sign([owner], recent_blockhash)
        position = transaction.message.account_keys.index(owner.pubkey())
        return transaction.signatures[position]

    async def _get_relay_fee(
        self,
        fee_payer: Pubkey,
        fee_payer_signers: List[Keypair],
        destination_account_instructions: AccountInstructions,
        recent_blockhash: Hash,
    ) -> int:
        async def signature_fees() -> int:
            if not fee_payer_signers:
                return 0
            lamports_per_signature = await self.get_lamports_per_signature(
                fee_payer, recent_blockhash
            )
            return lamports_per_signature * (
                len(fee_payer_signers) + RELAY_SIGNATURE_ALLOWANCE
            )

        async def creation_fee() -> int:
            if not destination_account_instructions.instructions:
                return 0
            return (
                await self._connection.get_minimum_balance_for_rent_exemption(
                    TOKEN_ACCOUNT_LEN
                )
            ).value

        fees = await asyncio.gather(signature_fees(), creation_fee())
        return sum(fees)

    @staticmethod
    def _compensation_amounts(
        compensation_swap_pool: Pool, fee_amount: int
    ) -> Tuple[int, int]:
        """
        Sizes the swap of source token into wrapped SOL that pays the relayer.

        Returns:
            The source token input and the minimum wrapped SOL output, which is
            never below fee_amount.
        """
        target = math.ceil(Fraction(fee_amount) / (1 - Fraction(str(RELAY_SLIPPAGE))))
        amount_in = required_input_amount(
            compensation_swap_pool, target, include_fees=True
        )
        if amount_in is None:
            raise InvalidPoolException(
                f"Pool {compensation_swap_pool.address} cannot cover a fee of "
                f"{fee_amount} lamports"
            )
        min_amount_out = minimum_receive_amount(
            compensation_swap_pool, amount_in, RELAY_SLIPPAGE, include_fees=True
        )
        if min_amount_out is None or min_amount_out < fee_amount:
            raise InvalidPoolException(
                f"Swap pool {compensation_swap_pool.address} is not valid"
            )
        return amount_in, min_amount_out

    async def _swap_proxy_send_transaction(
        self,
        proxy: FeeRelayerProxy,
        owner: Keypair,
        fee_payer: Pubkey,
        pool: Pool,
        source: Pubkey,
        destination: Pubkey,
        amount: int,
        destination_account_instructions: AccountInstructions,
        slippage: float,
        instructions: List[Instruction],
        cleanup_instructions: List[Instruction],
    ) -> str:
        async def get_compensation_pool() -> Pool:
            compensation_pool = await self.get_matched_pool(
                WRAPPED_SOL_MINT, pool.swap_data.mint_a
            )
            return await self.get_pool_with_token_balances(compensation_pool)

        (
            fee_payer_wsol_account_instructions,
            fee_compensation_pool,
            blockhash_resp,
        ) = await asyncio.gather(
            self.account_preparer.prepare_for_creating_temp_account_and_close(
                amount=0, payer=fee_payer
            ),
            get_compensation_pool(),
            self._connection.get_latest_blockhash(),
        )
        recent_blockhash = blockhash_resp.value.blockhash

        fee_amount = await self._get_relay_fee(
            fee_payer,
            fee_payer_wsol_account_instructions.signers,
            destination_account_instructions,
            recent_blockhash,
        )
        logger.info("Fee relayer compensation: %d lamports", fee_amount)

        # the user pays the relayer in source token, received as wrapped SOL
        compensation_swap_pool = fee_compensation_pool.reversed()
        fee_amount_in, fee_min_amount_out = self._compensation_amounts(
            compensation_swap_pool, fee_amount
        )
        logger.debug(
            "Compensation swap: %d in, at least %d lamports out",
            fee_amount_in,
            fee_min_amount_out,
        )

        instructions = list(instructions)
        instructions.extend(fee_payer_wsol_account_instructions.instructions)
        instructions.append(
            self.swap_instruction(
                pool=compensation_swap_pool,
                source=source,
                destination=fee_payer_wsol_account_instructions.account,
                user_transfer_authority=owner.pubkey(),
                amount=fee_amount_in,
                slippage=RELAY_SLIPPAGE,
                minimum_amount_out=fee_min_amount_out,
            )
        )

        cleanup_instructions = list(cleanup_instructions)
        cleanup_instructions.extend(
            fee_payer_wsol_account_instructions.cleanup_instructions
        )

        if fee_payer_wsol_account_instructions.secret_key is None:
            raise FeePayerUnavailableException("Could not create fee payer account")

        min_amount_out = minimum_receive_amount(
            pool, amount, slippage, include_fees=True
        )
        if min_amount_out is None:
            raise InvalidPoolException("Swap pool is not valid")

        signature = self.get_signature_for_proxy(
            owner=owner,
            fee_payer=fee_payer,
            instructions=instructions + cleanup_instructions,
            recent_blockhash=recent_blockhash,
        )

        params = RelayedSwapParams(
            source_token=source,
            destination_token=destination,
            source_token_mint=pool.swap_data.mint_a,
            destination_token_mint=pool.swap_data.mint_b,
            user_authority=owner.pubkey(),
            pool=pool.to_svm_model(),
            amount=amount,
            min_amount_out=min_amount_out,
            fee_compensation_pool=compensation_swap_pool.to_svm_model(),
            fee_amount=fee_amount,
            fee_min_amount_out=fee_min_amount_out,
            fee_payer_wsol_account_keypair=str(
                Keypair.from_bytes(fee_payer_wsol_account_instructions.secret_key)
            ),
            signature=signature,
            blockhash=recent_blockhash,
        )
        transaction_id = await proxy.swap_token(params)
        logger.info("Fee relayer sent swap transaction %s", transaction_id)
        return transaction_id
