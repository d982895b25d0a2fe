import re
import typing
from anchorpy.error import ProgramError


class AlreadyInUse(ProgramError):
    def __init__(self) -> None:
        super().__init__(0, "Swap account already in use")

    code = 0
    name = "AlreadyInUse"
    msg = "Swap account already in use"


class InvalidProgramAddress(ProgramError):
    def __init__(self) -> None:
        super().__init__(
            1, "Invalid program address generated from bump seed and key"
        )

    code = 1
    name = "InvalidProgramAddress"
    msg = "Invalid program address generated from bump seed and key"


class InvalidOwner(ProgramError):
    def __init__(self) -> None:
        super().__init__(2, "Input account owner is not the program address")

    code = 2
    name = "InvalidOwner"
    msg = "Input account owner is not the program address"


class InvalidOutputOwner(ProgramError):
    def __init__(self) -> None:
        super().__init__(3, "Output pool account owner cannot be the program address")

    code = 3
    name = "InvalidOutputOwner"
    msg = "Output pool account owner cannot be the program address"


class ExpectedMint(ProgramError):
    def __init__(self) -> None:
        super().__init__(4, "Deserialized account is not an SPL Token mint")

    code = 4
    name = "ExpectedMint"
    msg = "Deserialized account is not an SPL Token mint"


class ExpectedAccount(ProgramError):
    def __init__(self) -> None:
        super().__init__(5, "Deserialized account is not an SPL Token account")

    code = 5
    name = "ExpectedAccount"
    msg = "Deserialized account is not an SPL Token account"


class EmptySupply(ProgramError):
    def __init__(self) -> None:
        super().__init__(6, "Input token account empty")

    code = 6
    name = "EmptySupply"
    msg = "Input token account empty"


class InvalidSupply(ProgramError):
    def __init__(self) -> None:
        super().__init__(7, "Pool token mint has a non-zero supply")

    code = 7
    name = "InvalidSupply"
    msg = "Pool token mint has a non-zero supply"


class InvalidDelegate(ProgramError):
    def __init__(self) -> None:
        super().__init__(8, "Token account has a delegate")

    code = 8
    name = "InvalidDelegate"
    msg = "Token account has a delegate"


class InvalidInput(ProgramError):
    def __init__(self) -> None:
        super().__init__(9, "InvalidInput")

    code = 9
    name = "InvalidInput"
    msg = "InvalidInput"


class IncorrectSwapAccount(ProgramError):
    def __init__(self) -> None:
        super().__init__(
            10, "Address of the provided swap token account is incorrect"
        )

    code = 10
    name = "IncorrectSwapAccount"
    msg = "Address of the provided swap token account is incorrect"


class IncorrectPoolMint(ProgramError):
    def __init__(self) -> None:
        super().__init__(11, "Address of the provided pool token mint is incorrect")

    code = 11
    name = "IncorrectPoolMint"
    msg = "Address of the provided pool token mint is incorrect"


class InvalidOutput(ProgramError):
    def __init__(self) -> None:
        super().__init__(12, "InvalidOutput")

    code = 12
    name = "InvalidOutput"
    msg = "InvalidOutput"


class CalculationFailure(ProgramError):
    def __init__(self) -> None:
        super().__init__(
            13, "General calculation failure due to overflow or underflow"
        )

    code = 13
    name = "CalculationFailure"
    msg = "General calculation failure due to overflow or underflow"


class InvalidInstruction(ProgramError):
    def __init__(self) -> None:
        super().__init__(14, "Invalid instruction")

    code = 14
    name = "InvalidInstruction"
    msg = "Invalid instruction"


class RepeatedMint(ProgramError):
    def __init__(self) -> None:
        super().__init__(15, "Swap input token accounts have the same mint")

    code = 15
    name = "RepeatedMint"
    msg = "Swap input token accounts have the same mint"


class ExceededSlippage(ProgramError):
    def __init__(self) -> None:
        super().__init__(16, "Swap instruction exceeds desired slippage limit")

    code = 16
    name = "ExceededSlippage"
    msg = "Swap instruction exceeds desired slippage limit"


class InvalidCloseAuthority(ProgramError):
    def __init__(self) -> None:
        super().__init__(17, "Token account has a close authority")

    code = 17
    name = "InvalidCloseAuthority"
    msg = "Token account has a close authority"


class InvalidFreezeAuthority(ProgramError):
    def __init__(self) -> None:
        super().__init__(18, "Pool token mint has a freeze authority")

    code = 18
    name = "InvalidFreezeAuthority"
    msg = "Pool token mint has a freeze authority"


class IncorrectFeeAccount(ProgramError):
    def __init__(self) -> None:
        super().__init__(19, "Pool fee token account incorrect")

    code = 19
    name = "IncorrectFeeAccount"
    msg = "Pool fee token account incorrect"


class ZeroTradingTokens(ProgramError):
    def __init__(self) -> None:
        super().__init__(20, "Given pool token amount results in zero trading tokens")

    code = 20
    name = "ZeroTradingTokens"
    msg = "Given pool token amount results in zero trading tokens"


class FeeCalculationFailure(ProgramError):
    def __init__(self) -> None:
        super().__init__(
            21, "Fee calculation failed due to overflow, underflow, or unexpected 0"
        )

    code = 21
    name = "FeeCalculationFailure"
    msg = "Fee calculation failed due to overflow, underflow, or unexpected 0"


class ConversionFailure(ProgramError):
    def __init__(self) -> None:
        super().__init__(22, "Conversion to u64 failed with an overflow or underflow")

    code = 22
    name = "ConversionFailure"
    msg = "Conversion to u64 failed with an overflow or underflow"


class InvalidFee(ProgramError):
    def __init__(self) -> None:
        super().__init__(
            23, "The provided fee does not match the program owner's constraints"
        )

    code = 23
    name = "InvalidFee"
    msg = "The provided fee does not match the program owner's constraints"


class IncorrectTokenProgramId(ProgramError):
    def __init__(self) -> None:
        super().__init__(
            24,
            "The provided token program does not match the token program expected by the swap",
        )

    code = 24
    name = "IncorrectTokenProgramId"
    msg = "The provided token program does not match the token program expected by the swap"


class UnsupportedCurveType(ProgramError):
    def __init__(self) -> None:
        super().__init__(
            25, "The provided curve type is not supported by the program owner"
        )

    code = 25
    name = "UnsupportedCurveType"
    msg = "The provided curve type is not supported by the program owner"


class InvalidCurve(ProgramError):
    def __init__(self) -> None:
        super().__init__(26, "The provided curve parameters are invalid")

    code = 26
    name = "InvalidCurve"
    msg = "The provided curve parameters are invalid"


class UnsupportedCurveOperation(ProgramError):
    def __init__(self) -> None:
        super().__init__(27, "The operation cannot be performed on the given curve")

    code = 27
    name = "UnsupportedCurveOperation"
    msg = "The operation cannot be performed on the given curve"


class InvalidFeeAccount(ProgramError):
    def __init__(self) -> None:
        super().__init__(28, "The provided fee account is invalid")

    code = 28
    name = "InvalidFeeAccount"
    msg = "The provided fee account is invalid"


CustomError = typing.Union[
    AlreadyInUse,
    InvalidProgramAddress,
    InvalidOwner,
    InvalidOutputOwner,
    ExpectedMint,
    ExpectedAccount,
    EmptySupply,
    InvalidSupply,
    InvalidDelegate,
    InvalidInput,
    IncorrectSwapAccount,
    IncorrectPoolMint,
    InvalidOutput,
    CalculationFailure,
    InvalidInstruction,
    RepeatedMint,
    ExceededSlippage,
    InvalidCloseAuthority,
    InvalidFreezeAuthority,
    IncorrectFeeAccount,
    ZeroTradingTokens,
    FeeCalculationFailure,
    ConversionFailure,
    InvalidFee,
    IncorrectTokenProgramId,
    UnsupportedCurveType,
    InvalidCurve,
    UnsupportedCurveOperation,
    InvalidFeeAccount,
]
CUSTOM_ERROR_MAP: dict[int, CustomError] = {
    0: AlreadyInUse(),
    1: InvalidProgramAddress(),
    2: InvalidOwner(),
    3: InvalidOutputOwner(),
    4: ExpectedMint(),
    5: ExpectedAccount(),
    6: EmptySupply(),
    7: InvalidSupply(),
    8: InvalidDelegate(),
    9: InvalidInput(),
    10: IncorrectSwapAccount(),
    11: IncorrectPoolMint(),
    12: InvalidOutput(),
    13: CalculationFailure(),
    14: InvalidInstruction(),
    15: RepeatedMint(),
    16: ExceededSlippage(),
    17: InvalidCloseAuthority(),
    18: InvalidFreezeAuthority(),
    19: IncorrectFeeAccount(),
    20: ZeroTradingTokens(),
    21: FeeCalculationFailure(),
    22: ConversionFailure(),
    23: InvalidFee(),
    24: IncorrectTokenProgramId(),
    25: UnsupportedCurveType(),
    26: InvalidCurve(),
    27: UnsupportedCurveOperation(),
    28: InvalidFeeAccount(),
}

_CUSTOM_ERROR_LOG = re.compile(
    r"Program (\w+) failed: custom program error: 0x([0-9a-fA-F]+)"
)


def from_code(code: int) -> typing.Optional[CustomError]:
    maybe_err = CUSTOM_ERROR_MAP.get(code)
    if maybe_err is None:
        return None
    return maybe_err


def from_logs(
    logs: typing.List[str], program_id: str
) -> typing.Optional[CustomError]:
    for log in logs:
        match = _CUSTOM_ERROR_LOG.search(log)
        if match is not None and match.group(1) == program_id:
            return from_code(int(match.group(2), 16))
    return None
