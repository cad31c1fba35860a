"""pegfee: peg-aware dynamic swap fees for liquidity pools."""

from .errors import PegFeeError, InvalidPrice, InvalidParameters
from .units import UnitManager, UnitSpec, QuantityInput
from .fields import quantity_field, fee_field, bps_field
from .fixed_point import (
    WAD,
    BPS,
    FEE_TYPE_MAX,
    MAX_LP_FEE,
    MAX_PRICE,
    to_wad,
    from_wad,
)
from .sqrt_price import (
    Q96,
    MIN_SQRT_PRICE,
    MAX_SQRT_PRICE,
    sqrt_price_x96_to_price,
    price_to_sqrt_price_x96,
    invert_price,
)
from .runtime import QuantityNode
from .fee import (
    PegFeeConfig,
    FeeRuntime,
    FeeBatch,
    FeeDiagnostics,
    FeeParameters,
    FeeResult,
    FeeZone,
    PriceObservation,
    SwapDirection,
    compute_fee,
    compute_fee_batch,
    compute_fee_for_observation,
)
from .validation import ValidationReport, validate_fee_config
from .adapters import PegFeeAdapter

__all__ = [
    # Errors
    'PegFeeError',
    'InvalidPrice',
    'InvalidParameters',
    # Units
    'UnitManager',
    'UnitSpec',
    'QuantityInput',
    # Fields
    'quantity_field',
    'fee_field',
    'bps_field',
    # Fixed point
    'WAD',
    'BPS',
    'FEE_TYPE_MAX',
    'MAX_LP_FEE',
    'MAX_PRICE',
    'to_wad',
    'from_wad',
    # Sqrt prices
    'Q96',
    'MIN_SQRT_PRICE',
    'MAX_SQRT_PRICE',
    'sqrt_price_x96_to_price',
    'price_to_sqrt_price_x96',
    'invert_price',
    # Runtime structures
    'QuantityNode',
    'FeeRuntime',
    'FeeBatch',
    # Fee (core tier)
    'PegFeeConfig',
    'FeeDiagnostics',
    'FeeParameters',
    'FeeResult',
    'FeeZone',
    'PriceObservation',
    'SwapDirection',
    'compute_fee',
    'compute_fee_batch',
    'compute_fee_for_observation',
    # Validation
    'ValidationReport',
    'validate_fee_config',
    # Adapters (high-level tier)
    'PegFeeAdapter',
]
