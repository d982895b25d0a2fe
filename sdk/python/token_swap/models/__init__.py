from pydantic import BaseModel, Field
from token_swap.models.base import IntString
from token_swap.models.svm import SvmAddress, SvmHash, SvmSignature, SwapPoolSvm


class RelayedSwapParams(BaseModel):
    """
    Attributes:
        source_token: The user's token account the swap spends from.
        destination_token: The user's token account the swap pays into.
        source_token_mint: The mint of the source token.
        destination_token_mint: The mint of the destination token.
        user_authority: The wallet that owns the source token account.
        pool: The pool executing the user's swap.
        amount: The amount of source token to swap.
        min_amount_out: The minimum amount of destination token to accept.
        fee_compensation_pool: The pool executing the relayer's compensation swap.
        fee_amount: The amount owed to the relayer for fees and account rent, in lamports.
        fee_min_amount_out: The minimum amount the relayer accepts from the compensation swap.
        fee_payer_wsol_account_keypair: Base58 secret of the relayer's temporary wrapped SOL account.
        signature: The user's signature over the transaction.
        blockhash: The recent blockhash the signature was made with.
    """

    source_token: SvmAddress
    destination_token: SvmAddress
    source_token_mint: SvmAddress
    destination_token_mint: SvmAddress
    user_authority: SvmAddress
    pool: SwapPoolSvm
    amount: IntString
    min_amount_out: IntString
    fee_compensation_pool: SwapPoolSvm
    fee_amount: IntString
    fee_min_amount_out: IntString
    fee_payer_wsol_account_keypair: str
    signature: SvmSignature
    blockhash: SvmHash


class SwapResponse(BaseModel):
    """
    Attributes:
        transaction_id: The signature of the submitted transaction.
        new_wallet_pubkey: The associated token account created for the destination, if any.
    """

    transaction_id: str
    new_wallet_pubkey: str | None = Field(default=None)
