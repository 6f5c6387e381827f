"""Request and response bodies for the simulator API.

Amounts are accepted as integers or decimal strings and returned as
decimal strings.
"""

from pydantic import BaseModel, Field

from pairdex.models.types import Address, Bytes, Uint256


class DeployAssetRequest(BaseModel):
    deployer: Address
    name: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    decimals: int = Field(default=18, ge=0, le=255)


class AssetMintRequest(BaseModel):
    to: Address
    amount: Uint256


class ApproveRequest(BaseModel):
    sender: Address
    spender: Address
    amount: Uint256


class CreatePairRequest(BaseModel):
    sender: Address
    token_a: Address
    token_b: Address


class MintRequest(BaseModel):
    sender: Address
    recipient: Address
    amount0_in: Uint256
    amount1_in: Uint256


class BurnRequest(BaseModel):
    sender: Address
    recipient: Address


class SwapRequest(BaseModel):
    sender: Address
    recipient: Address
    amount0_out: Uint256 = 0
    amount1_out: Uint256 = 0


class PermitRequest(BaseModel):
    owner: Address
    spender: Address
    value: Uint256
    deadline: Uint256
    signature: Bytes


class AddressResponse(BaseModel):
    address: str


class PairResponse(BaseModel):
    pair: str
    token0: str | None = None
    token1: str | None = None


class PairListResponse(BaseModel):
    pairs: list[str]


class BalanceResponse(BaseModel):
    owner: str
    balance: str
    nonce: str | None = None


class PoolStateResponse(BaseModel):
    address: str
    token0: str
    token1: str
    reserve0: str
    reserve1: str
    total_supply: str
    domain_separator: str


class MintResponse(BaseModel):
    shares: str


class AmountsResponse(BaseModel):
    amount0: str
    amount1: str


class AllowanceResponse(BaseModel):
    owner: str
    spender: str
    allowance: str
    nonce: str | None = None
