"""
Interactive confirmation before destructive steps.

Prompts default to "yes" on an empty answer so a confirmed refresh is
a single Enter away; --yes answers every prompt without reading input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import UserDeclined

LOG = logging.getLogger(__name__)

InputFunc = Callable[[str], str]

_YES_ANSWERS = {"", "y", "yes"}


@dataclass(frozen=True)
class ConfirmationPrompt:
    question: str
    fallback_guidance: Optional[str] = None


def confirm(
    prompt: ConfirmationPrompt,
    *,
    skip_prompts: bool,
    input_func: Optional[InputFunc] = None,
) -> bool:
    """
    Ask the operator to confirm and return whether to proceed.

    End of input counts as a refusal: a destructive step is never
    confirmed by a closed stdin.
    """

    if skip_prompts:
        LOG.debug("Auto-confirmed: %s", prompt.question)
        return True

    if input_func is None:
        input_func = input

    try:
        answer = input_func(f"{prompt.question} [Y/n] ")
    except EOFError:
        return False

    return answer.strip().lower() in _YES_ANSWERS


def require_confirmation(
    prompt: ConfirmationPrompt,
    *,
    skip_prompts: bool,
    input_func: Optional[InputFunc] = None,
) -> None:
    """Confirm or abort the run with the prompt's guidance."""

    if not confirm(prompt, skip_prompts=skip_prompts, input_func=input_func):
        raise UserDeclined(prompt.fallback_guidance)
