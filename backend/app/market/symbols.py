"""Symbol normalization for equity tickers and crypto pairs."""

from __future__ import annotations

# Quote assets recognised at the end of a pair. Order does not matter: a
# symbol is canonical as soon as it ends with any of them.
QUOTE_CURRENCIES: tuple[str, ...] = ("USDT", "USDC", "BUSD", "USD", "BTC", "ETH", "BNB")
DEFAULT_QUOTE = "USDT"

_SEPARATORS = str.maketrans("", "", "-/")


def normalize_symbol(raw: str) -> str:
    """Trim and uppercase. Used for equity-style tickers."""
    return raw.strip().upper()


def normalize_crypto_symbol(raw: str) -> str:
    """Map any spelling of a pair to its canonical instrument id.

    ``btc-usdt``, ``BTC/USDT`` and ``" btcusdt "`` all become ``BTCUSDT``;
    a bare base asset such as ``sol`` gets the default quote appended
    (``SOLUSDT``). Idempotent. Blank input yields ``DEFAULT_QUOTE``.
    """
    cleaned = normalize_symbol(raw).translate(_SEPARATORS)
    if cleaned.endswith(QUOTE_CURRENCIES):
        return cleaned
    return f"{cleaned}{DEFAULT_QUOTE}"
