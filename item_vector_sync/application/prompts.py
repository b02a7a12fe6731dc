from __future__ import annotations

import json
from typing import Dict, List, Sequence

SYSTEM_PROMPT_TEMPLATE = """You are an intelligent assistant that helps users find information about products in our inventory.
Use the following item data to answer questions accurately:

{context}

Guidelines:
- Be concise but helpful
- If you don't know the answer, say so
- Highlight unique features when relevant
- Never make up information not in the provided data"""


def system_prompt(context: Sequence[Dict[str, object]]) -> str:
    context_text = json.dumps(list(context), indent=4, ensure_ascii=False, default=str)
    return SYSTEM_PROMPT_TEMPLATE.format(context=context_text)


def build_messages(
    question: str,
    context: Sequence[Dict[str, object]],
    history: Sequence[Dict[str, str]],
) -> List[Dict[str, str]]:
    """System instruction, then the caller's history verbatim, then the question."""
    messages: List[Dict[str, str]] = [{"role": "system", "content": system_prompt(context)}]
    messages.extend(history)
    messages.append({"role": "user", "content": question})
    return messages
