"""Tests for AI prompt construction."""

from clarity.core.modules.ai.prompts import (
    DEFAULT_DOCUMENT_PROMPT,
    PLAIN_ENGLISH_INSTRUCTION,
    build_messages,
    build_prompt_text,
)


class TestBuildPromptText:
    """Tests for build_prompt_text function."""

    def test_instruction_prefixes_question(self):
        text = build_prompt_text("What is osmosis?", has_document=False)
        assert text == f"{PLAIN_ENGLISH_INSTRUCTION}\n\nWhat is osmosis?"

    def test_document_without_question_gets_default(self):
        text = build_prompt_text(None, has_document=True)
        assert text.endswith(DEFAULT_DOCUMENT_PROMPT)

    def test_question_wins_over_default(self):
        text = build_prompt_text("List the key dates", has_document=True)
        assert DEFAULT_DOCUMENT_PROMPT not in text


class TestBuildMessages:
    """Tests for build_messages function."""

    def test_text_only(self):
        messages = build_messages("What is osmosis?", None)
        assert messages == [{"role": "user", "content": f"{PLAIN_ENGLISH_INSTRUCTION}\n\nWhat is osmosis?"}]

    def test_document_reference_adds_file_part(self):
        messages = build_messages("Explain page 2", "http://testserver/api/files/public/public/a.pdf")
        assert len(messages) == 1
        text_part, file_part = messages[0]["content"]
        assert text_part == {"type": "text", "text": f"{PLAIN_ENGLISH_INSTRUCTION}\n\nExplain page 2"}
        assert file_part == {
            "type": "file",
            "file": {"file_id": "http://testserver/api/files/public/public/a.pdf", "format": "application/pdf"},
        }
