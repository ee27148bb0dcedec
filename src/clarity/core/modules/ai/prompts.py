from typing import Any

PLAIN_ENGLISH_INSTRUCTION = "Answer in simple, plain English. No bullet points, no technical jargon."
DEFAULT_DOCUMENT_PROMPT = "Summarize this document:"
DOCUMENT_MIME_TYPE = "application/pdf"


def build_prompt_text(prompt: str | None, has_document: bool) -> str:
    """Prefix the user's question with the fixed answer-style instruction."""
    question = prompt or (DEFAULT_DOCUMENT_PROMPT if has_document else "")
    return f"{PLAIN_ENGLISH_INSTRUCTION}\n\n{question}"


def build_messages(prompt: str | None, file_url: str | None) -> list[dict[str, Any]]:
    """Build the single-turn chat messages sent to the language model.

    With a document reference the user turn carries a text part and a file part
    pointing at the PDF; otherwise it is plain text.
    """
    text = build_prompt_text(prompt, has_document=file_url is not None)
    if file_url is None:
        return [{"role": "user", "content": text}]
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": text},
                {"type": "file", "file": {"file_id": file_url, "format": DOCUMENT_MIME_TYPE}},
            ],
        }
    ]
