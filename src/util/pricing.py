"""
Token cost calculation from the static model price table.
"""

from typing import Optional, Tuple

from common.logging import get_logger
from config.config import MODEL_PRICING, TOKENS_PER_PRICE_UNIT

logger = get_logger(__name__)


def lookup_price(model_name: str) -> Optional[Tuple[float, float]]:
    """
    Find the (input, output) USD price per million tokens for a model.

    Exact matches win; otherwise the longest price-table key that prefixes the
    model name is used, so dated snapshots resolve to their family.

    Args:
        model_name (str): Model identifier as sent to the provider.

    Returns:
        Optional[Tuple[float, float]]: Prices, or None for unknown models.
    """
    if not model_name:
        return None
    if model_name in MODEL_PRICING:
        return MODEL_PRICING[model_name]

    candidates = [key for key in MODEL_PRICING if model_name.startswith(key)]
    if not candidates:
        return None
    return MODEL_PRICING[max(candidates, key=len)]


def calculate_cost(model_name: str, prompt_tokens: int, completion_tokens: int) -> Optional[float]:
    """
    Compute the USD cost of a call.

    Args:
        model_name (str): Model identifier.
        prompt_tokens (int): Input token count.
        completion_tokens (int): Output token count.

    Returns:
        Optional[float]: Cost rounded to 6 decimals, or None if the model has no known price.

    Raises:
        ValueError: If a token count is negative.
    """
    if prompt_tokens < 0 or completion_tokens < 0:
        raise ValueError("token counts must be non-negative")

    price = lookup_price(model_name)
    if price is None:
        logger.warning("No price known for model", extra={"model": model_name})
        return None

    input_price, output_price = price
    cost = (prompt_tokens * input_price + completion_tokens * output_price) / TOKENS_PER_PRICE_UNIT
    return round(cost, 6)
