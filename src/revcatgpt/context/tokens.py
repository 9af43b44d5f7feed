"""
Token estimation for GPT context budgets.

Counts follow OpenAI's chat message accounting: every message costs a fixed
overhead on top of its BPE-encoded content, and every reply is primed with
three more tokens. A context fragment is counted as one message with only
content set, so its cost is ``3 + len(encode(text)) + 3`` for GPT-4 models.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, Mapping, Tuple

import tiktoken

logger = logging.getLogger("revcatgpt.tokens")

DEFAULT_MODEL = "gpt-4-0314"
FALLBACK_ENCODING = "cl100k_base"
REPLY_PRIMING_TOKENS = 3

# model -> (tokens per message, tokens per name)
_MESSAGE_OVERHEAD: Dict[str, Tuple[int, int]] = {
    "gpt-3.5-turbo-0301": (4, -1),
    "gpt-3.5-turbo-0613": (3, 1),
    "gpt-3.5-turbo-16k-0613": (3, 1),
    "gpt-4-0314": (3, 1),
    "gpt-4-32k-0314": (3, 1),
    "gpt-4-0613": (3, 1),
    "gpt-4-32k-0613": (3, 1),
}


@lru_cache(maxsize=None)
def _encoding_for(model: str) -> tiktoken.Encoding:
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        logger.warning("No tokenizer known for model %s, using %s", model, FALLBACK_ENCODING)
        return tiktoken.get_encoding(FALLBACK_ENCODING)


def _message_overhead(model: str) -> Tuple[int, int]:
    # Newer chat models all use the 0613 accounting.
    return _MESSAGE_OVERHEAD.get(model, (3, 1))


def num_tokens_from_messages(messages: Iterable[Mapping[str, str]], model: str = DEFAULT_MODEL) -> int:
    """
    Number of prompt tokens ``messages`` would use with ``model``.

    Each message is a mapping of ``role``, ``content`` and optional ``name``.
    """
    encoding = _encoding_for(model)
    tokens_per_message, tokens_per_name = _message_overhead(model)

    num_tokens = 0
    for message in messages:
        num_tokens += tokens_per_message
        for key, value in message.items():
            num_tokens += len(encoding.encode(value or "", disallowed_special=()))
            if key == "name":
                num_tokens += tokens_per_name
    return num_tokens + REPLY_PRIMING_TOKENS


def estimate_tokens(text: str, model: str = DEFAULT_MODEL) -> int:
    """Token cost of ``text`` sent as the content of a single chat message."""
    return num_tokens_from_messages([{"content": text}], model)
