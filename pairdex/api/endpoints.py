"""API endpoints for the pairdex simulator."""

import threading
from dataclasses import dataclass, field

import structlog
from fastapi import APIRouter, Depends

from pairdex.amm.pool import LiquidityPool
from pairdex.api.schemas import (
    AddressResponse,
    AllowanceResponse,
    AmountsResponse,
    ApproveRequest,
    AssetMintRequest,
    BalanceResponse,
    BurnRequest,
    CreatePairRequest,
    DeployAssetRequest,
    MintRequest,
    MintResponse,
    PairListResponse,
    PairResponse,
    PermitRequest,
    PoolStateResponse,
    SwapRequest,
)
from pairdex.assets import StandardAsset
from pairdex.chain import Chain
from pairdex.config import load_chain_config_from_env, load_pool_config_from_env
from pairdex.errors import UnknownContract
from pairdex.pools.registry import PoolRegistry

logger = structlog.get_logger()

router = APIRouter()

# Identity that deploys the registry of the default exchange
OPERATOR = "0x" + "0e" * 20


@dataclass
class Exchange:
    """One chain with one registry; every request runs under `lock`."""

    chain: Chain
    registry: PoolRegistry
    lock: threading.Lock = field(default_factory=threading.Lock)

    @classmethod
    def create(cls, chain: Chain | None = None) -> "Exchange":
        chain = chain or Chain(load_chain_config_from_env())
        registry = PoolRegistry.deploy(chain, OPERATOR, pool_config=load_pool_config_from_env())
        return cls(chain=chain, registry=registry)

    def pool(self, address: str) -> LiquidityPool:
        contract = self.chain.get_contract(address)
        if not isinstance(contract, LiquidityPool):
            raise UnknownContract(f"No pool at {address}")
        return contract

    def asset(self, address: str) -> StandardAsset:
        contract = self.chain.get_contract(address)
        if not isinstance(contract, StandardAsset):
            raise UnknownContract(f"No asset at {address}")
        return contract


_default_exchange: Exchange | None = None
_default_exchange_lock = threading.Lock()


def get_default_exchange() -> Exchange:
    global _default_exchange
    if _default_exchange is None:
        with _default_exchange_lock:
            if _default_exchange is None:
                _default_exchange = Exchange.create()
                logger.info(
                    "exchange_started",
                    chain_id=_default_exchange.chain.chain_id,
                    registry=_default_exchange.registry.address,
                )
    return _default_exchange


def get_exchange() -> Exchange:
    """Dependency provider for the exchange.

    Override this in tests to inject a fresh exchange:
        app.dependency_overrides[get_exchange] = lambda: exchange
    """
    return get_default_exchange()


# --- Assets ---


@router.post("/assets", response_model=AddressResponse)
def deploy_asset(body: DeployAssetRequest, exchange: Exchange = Depends(get_exchange)) -> AddressResponse:
    with exchange.lock:
        asset = StandardAsset.deploy(
            exchange.chain,
            body.deployer,
            name=body.name,
            symbol=body.symbol,
            decimals=body.decimals,
        )
    return AddressResponse(address=asset.address)


@router.post("/assets/{asset}/mint", response_model=BalanceResponse)
def mint_asset(asset: str, body: AssetMintRequest, exchange: Exchange = Depends(get_exchange)) -> BalanceResponse:
    with exchange.lock:
        contract = exchange.asset(asset)
        contract.mint(body.to, body.amount)
        balance = contract.balance_of(body.to)
    return BalanceResponse(owner=body.to.lower(), balance=str(balance))


@router.post("/assets/{asset}/approve", response_model=AllowanceResponse)
def approve_asset(asset: str, body: ApproveRequest, exchange: Exchange = Depends(get_exchange)) -> AllowanceResponse:
    with exchange.lock:
        contract = exchange.asset(asset)
        contract.approve(body.sender, body.spender, body.amount)
        allowance = contract.allowance(body.sender, body.spender)
    return AllowanceResponse(owner=body.sender.lower(), spender=body.spender.lower(), allowance=str(allowance))


@router.get("/assets/{asset}/balances/{owner}", response_model=BalanceResponse)
def asset_balance(asset: str, owner: str, exchange: Exchange = Depends(get_exchange)) -> BalanceResponse:
    with exchange.lock:
        balance = exchange.asset(asset).balance_of(owner)
    return BalanceResponse(owner=owner.lower(), balance=str(balance))


# --- Registry ---


@router.post("/pairs", response_model=PairResponse)
def create_pair(body: CreatePairRequest, exchange: Exchange = Depends(get_exchange)) -> PairResponse:
    with exchange.lock:
        identity = exchange.registry.create_pair(body.sender, body.token_a, body.token_b)
        pool = exchange.pool(identity)
    return PairResponse(pair=identity, token0=pool.token0, token1=pool.token1)


@router.get("/pairs", response_model=PairListResponse)
def list_pairs(exchange: Exchange = Depends(get_exchange)) -> PairListResponse:
    with exchange.lock:
        return PairListResponse(pairs=list(exchange.registry.all_pairs))


@router.get("/pairs/{token_a}/{token_b}", response_model=PairResponse)
def get_pair(token_a: str, token_b: str, exchange: Exchange = Depends(get_exchange)) -> PairResponse:
    with exchange.lock:
        return PairResponse(pair=exchange.registry.get_pair(token_a, token_b))


@router.get("/pairs/{token_a}/{token_b}/predicted", response_model=PairResponse)
def predict_pair(token_a: str, token_b: str, exchange: Exchange = Depends(get_exchange)) -> PairResponse:
    with exchange.lock:
        return PairResponse(pair=exchange.registry.calculate_pool_address(token_a, token_b))


# --- Pools ---


@router.get("/pools/{pool}", response_model=PoolStateResponse)
def pool_state(pool: str, exchange: Exchange = Depends(get_exchange)) -> PoolStateResponse:
    with exchange.lock:
        contract = exchange.pool(pool)
        reserve0, reserve1 = contract.get_reserves()
        return PoolStateResponse(
            address=contract.address,
            token0=contract.token0,
            token1=contract.token1,
            reserve0=str(reserve0),
            reserve1=str(reserve1),
            total_supply=str(contract.total_supply()),
            domain_separator="0x" + contract.domain_separator.hex(),
        )


@router.get("/pools/{pool}/shares/{owner}", response_model=BalanceResponse)
def pool_shares(pool: str, owner: str, exchange: Exchange = Depends(get_exchange)) -> BalanceResponse:
    with exchange.lock:
        contract = exchange.pool(pool)
        return BalanceResponse(
            owner=owner.lower(),
            balance=str(contract.balance_of(owner)),
            nonce=str(contract.nonces(owner)),
        )


@router.post("/pools/{pool}/mint", response_model=MintResponse)
def mint(pool: str, body: MintRequest, exchange: Exchange = Depends(get_exchange)) -> MintResponse:
    with exchange.lock:
        shares = exchange.pool(pool).mint(body.sender, body.recipient, body.amount0_in, body.amount1_in)
    return MintResponse(shares=str(shares))


@router.post("/pools/{pool}/burn", response_model=AmountsResponse)
def burn(pool: str, body: BurnRequest, exchange: Exchange = Depends(get_exchange)) -> AmountsResponse:
    with exchange.lock:
        amount0, amount1 = exchange.pool(pool).burn(body.sender, body.recipient)
    return AmountsResponse(amount0=str(amount0), amount1=str(amount1))


@router.post("/pools/{pool}/swap", response_model=AmountsResponse)
def swap(pool: str, body: SwapRequest, exchange: Exchange = Depends(get_exchange)) -> AmountsResponse:
    """Execute a single-direction swap; the response carries the inputs paid."""
    with exchange.lock:
        amount0_in, amount1_in = exchange.pool(pool).swap(
            body.sender, body.recipient, body.amount0_out, body.amount1_out
        )
    return AmountsResponse(amount0=str(amount0_in), amount1=str(amount1_in))


@router.post("/pools/{pool}/permit", response_model=AllowanceResponse)
def permit(pool: str, body: PermitRequest, exchange: Exchange = Depends(get_exchange)) -> AllowanceResponse:
    """Grant a share allowance from an off-line signature."""
    with exchange.lock:
        contract = exchange.pool(pool)
        contract.permit(body.owner, body.spender, body.value, body.deadline, body.signature)
        allowance = contract.allowance(body.owner, body.spender)
        nonce = contract.nonces(body.owner)
    return AllowanceResponse(
        owner=body.owner.lower(),
        spender=body.spender.lower(),
        allowance=str(allowance),
        nonce=str(nonce),
    )
