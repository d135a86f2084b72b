from .clmm import (
    AmmConfig,
    DecreaseLiquidityResult,
    ObservationState,
    PersonalPositionState,
    PoolState,
    PoolStatus,
    PositionRewardInfo,
    ProtocolPositionState,
    RewardInfo,
    RewardState,
    SwapResult,
    TickArrayState,
    TickState,
)
from .events import (
    CollectProtocolFeeEvent,
    ConfigChangeEvent,
    CreatePersonalPositionEvent,
    DecreaseLiquidityEvent,
    IncreaseLiquidityEvent,
    LiquidityChangeEvent,
    PoolCreatedEvent,
    SwapEvent,
    UpdateRewardInfosEvent,
)
