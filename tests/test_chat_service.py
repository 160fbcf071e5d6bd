from wordsy.config import settings
from wordsy.services import chat_service


def test_reply_uses_cleaned_history(generator):
    result = chat_service.chat_reply(
        [{"role": " User ", "content": " Merhaba "}],
        generator,
        language="tr"
    )

    assert result["success"] is True
    assert result["reply"] == "Reply in tr to: Merhaba"
    assert generator.chat_calls[0]["messages"] == [{"role": "user", "content": "Merhaba"}]


def test_language_defaults_to_setting(generator):
    result = chat_service.chat_reply([{"role": "user", "content": "hi"}], generator)
    assert result["language"] == settings.default_language


def test_history_is_capped(generator):
    messages = []
    for i in range(30):
        messages.append({"role": "user", "content": f"question {i}"})
        messages.append({"role": "assistant", "content": f"answer {i}"})
    messages.append({"role": "user", "content": "last"})

    chat_service.chat_reply(messages, generator, language="en")

    sent = generator.chat_calls[0]["messages"]
    assert len(sent) == chat_service.MAX_HISTORY
    assert sent[-1]["content"] == "last"


def test_invalid_histories_are_rejected(generator):
    assert chat_service.chat_reply([], generator)["success"] is False
    assert chat_service.chat_reply([{"role": "system", "content": "x"}], generator)["success"] is False
    assert chat_service.chat_reply([{"role": "user", "content": "  "}], generator)["success"] is False
    assert chat_service.chat_reply([{"role": "assistant", "content": "hi"}], generator)["success"] is False
    assert generator.chat_calls == []


def test_generator_failure_is_reported(generator):
    generator.error = "service down"
    result = chat_service.chat_reply([{"role": "user", "content": "hi"}], generator)
    assert result == {"success": False, "message": "service down"}
