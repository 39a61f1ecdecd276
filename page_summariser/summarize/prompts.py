"""Chunk summary and merge prompts. Both demand bullet points only, no preamble."""
from __future__ import annotations

from page_summariser.llm.types import Prompt

CHUNK_SYSTEM = """Summarize the following content as bullet points. Format rules:
- Use bullet points (•) for each item
- Each bullet should be a concise 1-2 sentence summary
- If the content has numbered items (like "Top 10"), keep the numbers (1., 2., etc.)
- Output ONLY the bullet points - no introductions, no preambles, no "Here is a summary"
- Start directly with the first bullet point"""

CHUNK_USER_TEMPLATE = """Content ({part_label}):
{text}"""

MERGE_SYSTEM = """Combine these summaries into one clean bullet-point list. Format rules:
- Use bullet points (•) or numbered list if items have rankings
- Each bullet should be concise (1-2 sentences)
- Remove any duplicate information
- Output ONLY the bullet points - no introductions, no preambles
- Start directly with the first bullet point"""

MERGE_USER_TEMPLATE = """Summaries to combine:
{summaries}"""


def build_chunk_prompt(text: str, part_label: str) -> Prompt:
    """part_label is "full" for single-request mode, else "part i of n"."""
    return Prompt(instructions=CHUNK_SYSTEM, content=CHUNK_USER_TEMPLATE.format(part_label=part_label, text=text))


def build_merge_prompt(combined_summaries: str) -> Prompt:
    return Prompt(instructions=MERGE_SYSTEM, content=MERGE_USER_TEMPLATE.format(summaries=combined_summaries))
