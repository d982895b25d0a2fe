import typing
from . import fees
from .fees import Fees, FeesJSON
from . import swap_curve
from .swap_curve import SwapCurve, SwapCurveJSON
