"""Protocol constants for pairdex.

Centralizes identities, typehashes and ledger parameters.
"""

from eth_utils import keccak

# Maximum uint256 value
UINT256_MAX = 2**256 - 1

# The null identity (asset "not set", pair "not found")
ZERO_ADDRESS = "0x" + "00" * 20

# Fixed digest of the pool instantiation template.
# Changing the template string changes every derived pool identity.
POOL_TEMPLATE = "pairdex.LiquidityPool:v1"
POOL_INIT_CODE_HASH = keccak(text=POOL_TEMPLATE)

# CREATE2-style prefix byte for identity derivation
IDENTITY_PREFIX = b"\xff"

# EIP-712 typehashes
DOMAIN_TYPEHASH = keccak(
    text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
PERMIT_TYPEHASH = keccak(
    text="Permit(address owner,address spender,uint256 value,uint256 nonce,uint256 deadline)"
)

# Share ledger defaults
SHARE_NAME = "Pairdex Shares"
SHARE_SYMBOL = "PDX-LP"
SHARE_DECIMALS = 18
SHARE_VERSION = "1"

# Mainnet chain id
DEFAULT_CHAIN_ID = 1
