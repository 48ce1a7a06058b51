"""Prompt templates for the portfolio chat assistant."""

SYSTEM_PROMPT_TEMPLATE = """You are a helpful assistant. Use the following context to answer questions when relevant:

Context:
{context}

Instructions:
- Answer based on the provided context when possible
- If the context doesn't contain relevant information, use your general knowledge
- Be concise and helpful
- If you're unsure about something, say so"""


def build_system_prompt(context: str) -> str:
    """Place the retrieved context block into the system prompt."""
    return SYSTEM_PROMPT_TEMPLATE.format(context=context)
