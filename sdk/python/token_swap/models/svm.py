from typing import Annotated, Any

from pydantic import BaseModel, GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema
from solders.hash import Hash as _SvmHash
from solders.pubkey import Pubkey as _SvmAddress
from solders.signature import Signature as _SvmSignature


def _base58_core_schema(svm_type: Any) -> core_schema.CoreSchema:
    from_str_schema = core_schema.chain_schema(
        [
            core_schema.str_schema(),
            core_schema.no_info_plain_validator_function(svm_type.from_string),
        ]
    )

    return core_schema.json_or_python_schema(
        json_schema=from_str_schema,
        python_schema=core_schema.union_schema(
            [
                # check if it's an instance first before doing any further work
                core_schema.is_instance_schema(svm_type),
                from_str_schema,
            ]
        ),
        serialization=core_schema.plain_serializer_function_ser_schema(str),
    )


class _SvmAddressPydanticAnnotation:
    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        _source_type: Any,
        _handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return _base58_core_schema(_SvmAddress)

    @classmethod
    def __get_pydantic_json_schema__(
        cls, _core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        # Use the same schema that would be used for `str`
        return handler(core_schema.str_schema())


class _HashPydanticAnnotation:
    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        _source_type: Any,
        _handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return _base58_core_schema(_SvmHash)

    @classmethod
    def __get_pydantic_json_schema__(
        cls, _core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return handler(core_schema.str_schema())


class _SignaturePydanticAnnotation:
    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        _source_type: Any,
        _handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return _base58_core_schema(_SvmSignature)

    @classmethod
    def __get_pydantic_json_schema__(
        cls, _core_schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return handler(core_schema.str_schema())


SvmAddress = Annotated[_SvmAddress, _SvmAddressPydanticAnnotation]
SvmHash = Annotated[_SvmHash, _HashPydanticAnnotation]
SvmSignature = Annotated[_SvmSignature, _SignaturePydanticAnnotation]


class SwapPoolSvm(BaseModel):
    """
    Attributes:
        address: The address of the token swap state account.
        swap_program: The token swap program which owns the pool.
        authority: The program derived authority of the pool.
        token_account_a: The reserve token account the user swaps into.
        token_account_b: The reserve token account the user swaps out of.
        mint_a: The mint of the input side.
        mint_b: The mint of the output side.
        pool_mint: The mint of the pool's liquidity token.
        fee_account: The token account receiving the owner trade fees.
    """

    address: SvmAddress
    swap_program: SvmAddress
    authority: SvmAddress
    token_account_a: SvmAddress
    token_account_b: SvmAddress
    mint_a: SvmAddress
    mint_b: SvmAddress
    pool_mint: SvmAddress
    fee_account: SvmAddress
