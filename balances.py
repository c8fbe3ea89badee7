from typing import AbstractSet, Any, Dict, Iterable, List

from utils.formatting import (
    format_amount_short,
    format_usd,
    get_chain_label,
    scale_amount,
    to_number,
)


def is_spam(token: Dict[str, Any], spam_symbols: AbstractSet[str]) -> bool:
    symbol = token.get("symbol")
    return isinstance(symbol, str) and symbol in spam_symbols


def enrich_token(token: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of an upstream balance record with display-ready fields added."""
    amount_numeric = scale_amount(token.get("amount"), token.get("decimals"))
    value_usd = to_number(token.get("value_usd"))

    return {
        **token,
        "amountNumeric": amount_numeric,
        "valueUSDNumeric": value_usd,
        "amountFormatted": format_amount_short(amount_numeric),
        "valueUSDFormatted": format_usd(value_usd),
        "chain_label": get_chain_label(token),
    }


def enrich_balances(tokens: Iterable[Any], spam_symbols: AbstractSet[str]) -> List[Dict[str, Any]]:
    enriched: List[Dict[str, Any]] = []
    for token in tokens:
        if not isinstance(token, dict):
            continue
        # Removing spam tokens
        if is_spam(token, spam_symbols):
            continue
        enriched.append(enrich_token(token))
    return enriched


def total_usd_value(tokens: Iterable[Dict[str, Any]]) -> float:
    return sum((to_number(t.get("value_usd")) for t in tokens), 0.0)
