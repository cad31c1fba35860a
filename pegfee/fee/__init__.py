"""Peg-aware swap fee: configuration, value types and kernels."""

from .config import PegFeeConfig
from .runtime import FeeRuntime, FeeBatch
from .types import (
    FeeDiagnostics,
    FeeParameters,
    FeeResult,
    FeeZone,
    PriceObservation,
    SwapDirection,
)
from .kernel import (
    compute_fee,
    compute_fee_batch,
    compute_fee_for_observation,
    compute_fee_from_deviation,
    deviation_bps,
    is_toward,
)

__all__ = [
    'PegFeeConfig',
    'FeeRuntime',
    'FeeBatch',
    'FeeDiagnostics',
    'FeeParameters',
    'FeeResult',
    'FeeZone',
    'PriceObservation',
    'SwapDirection',
    'compute_fee',
    'compute_fee_batch',
    'compute_fee_for_observation',
    'compute_fee_from_deviation',
    'deviation_bps',
    'is_toward',
]
