import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_CEILING
from typing import Tuple, Union

logger = logging.getLogger("retrochain_sdk")


@dataclass(frozen=True)
class CoinAmount:
    denom: str
    amount: int


@dataclass(frozen=True)
class TxFee:
    amount: Tuple[CoinAmount, ...]
    gas_limit: int

    @property
    def total(self) -> int:
        return sum(c.amount for c in self.amount)


def ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


class FeeCalculator:
    """
    Converts gas into a fee at a fixed integer price ratio.

    ``fee_for`` pads a simulated gas-used figure (``ceil(gas_used * adjustment) +
    buffer``) before pricing it; ``fee_for_limit`` prices a limit that is already
    final. Amounts are always rounded up so a fee can never underpay.
    """

    def __init__(
        self,
        denom: str = "uretro",
        price_numerator: int = 1,
        price_denominator: int = 100,
        gas_adjustment: Union[Decimal, str] = Decimal("1.25"),
        gas_buffer: int = 5000,
        min_gas_limit: int = 0,
    ):
        if price_denominator <= 0:
            raise ValueError("price_denominator must be positive")
        self.denom = denom
        self.price_numerator = price_numerator
        self.price_denominator = price_denominator
        self.gas_adjustment = Decimal(gas_adjustment)
        self.gas_buffer = gas_buffer
        self.min_gas_limit = min_gas_limit

    def gas_limit_for(self, gas_used: int) -> int:
        padded = (Decimal(gas_used) * self.gas_adjustment).to_integral_value(rounding=ROUND_CEILING)
        return max(int(padded) + self.gas_buffer, self.min_gas_limit)

    def amount_for(self, gas_limit: int) -> int:
        if gas_limit <= 0:
            return 0
        return ceil_div(gas_limit * self.price_numerator, self.price_denominator)

    def fee_for(self, gas_used: int) -> TxFee:
        gas_limit = self.gas_limit_for(gas_used)
        fee = self.fee_for_limit(gas_limit)
        logger.debug(f"Fee for gas_used={gas_used}: gas_limit={gas_limit} amount={fee.total}{self.denom}")
        return fee

    def fee_for_limit(self, gas_limit: int) -> TxFee:
        return TxFee(
            amount=(CoinAmount(denom=self.denom, amount=self.amount_for(gas_limit)),),
            gas_limit=gas_limit,
        )
