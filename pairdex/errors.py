"""Pairdex error classes.

Every failure is raised synchronously to the caller. The chain savepoint
around the failing operation rolls back its state changes, so a raised
error never leaves partial state behind.

Categories:
- InputValidationError: malformed or disallowed arguments
- AuthorizationError: caller or signature is not allowed to act
- StateError: the operation is not valid in the current state
- ArithmeticFailure: an amount would leave the uint256 domain
- CollaboratorFailure: an external asset ledger reported failure
"""


class PairdexError(Exception):
    """Base error for pairdex operations."""

    pass


class InputValidationError(PairdexError):
    pass


class AuthorizationError(PairdexError):
    pass


class StateError(PairdexError):
    pass


class ArithmeticFailure(PairdexError, ArithmeticError):
    pass


class CollaboratorFailure(PairdexError):
    pass


# --- Input validation ---


class EqualAssets(InputValidationError):
    """Both sides of a pair are the same asset."""

    pass


class ZeroAsset(InputValidationError):
    """An asset identity is the null identity."""

    pass


class ZeroAmountIn(InputValidationError):
    """A liquidity deposit amount is zero."""

    pass


class BadOutputSelection(InputValidationError):
    """Swap must request exactly one non-zero output."""

    pass


class InvalidIdentity(InputValidationError):
    """String is not a 20-byte hex identity."""

    pass


# --- Authorization ---


class NotRegistry(AuthorizationError):
    """Only the registry that constructed the pool may initialize it."""

    pass


class InvalidSigner(AuthorizationError):
    """Recovered signer does not match the permit owner."""

    pass


class SignatureExpired(AuthorizationError):
    """Permit deadline is in the past."""

    pass


# --- State ---


class PairExists(StateError):
    """A pool is already recorded for this pair."""

    pass


class EmptyPool(StateError):
    """Pool has no liquidity for the requested operation."""

    pass


class NothingToBurn(StateError):
    """Caller holds no shares."""

    pass


class AlreadyInitialized(StateError):
    """Pool assets were already set."""

    pass


class ReentrantCall(StateError):
    """A pool operation was entered while another one is running."""

    pass


class IdentityCollision(StateError):
    """A contract already lives at the requested identity."""

    pass


class UnknownContract(StateError):
    """No contract is deployed at the identity."""

    pass


# --- Arithmetic ---


class InsufficientLiquidity(ArithmeticFailure):
    """Requested output is at or above the matching reserve."""

    pass


class InsufficientBalance(ArithmeticFailure):
    """Holder balance is below the transfer amount."""

    pass


class InsufficientAllowance(ArithmeticFailure):
    """Spender allowance is below the transfer amount."""

    pass


# --- Collaborators ---


class TransferFailed(CollaboratorFailure):
    """An asset ledger returned False from transfer or transfer_from."""

    pass
