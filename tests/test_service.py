"""Unit tests for ConversationController."""
import re

import httpx
import pytest

from src.consultation.models import BotEntry, UserEntry
from src.consultation.service import (
    ABORTED_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    ConversationController,
)
from utils.exceptions import ResponseShapeError, TransportError
from utils.settings import Settings

from tests.conftest import SYSTEM_PROMPT, gemini_payload

REPORT_ID = re.compile(r"^[A-Z0-9]+$")


class FakeClient:
    """Stands in for GeminiClient; `on_call` observes the controller mid-request."""

    def __init__(self, reply="Drink water.", error=None, on_call=None):
        self.reply = reply
        self.error = error
        self.on_call = on_call
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.on_call:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.reply


def make_controller(settings, client):
    return ConversationController(settings=settings, client=client, system_prompt=SYSTEM_PROMPT)


class TestSubmitSuccess:

    def test_appends_user_then_bot_entry(self, settings):
        controller = make_controller(settings, FakeClient(reply="  Drink water.\n"))

        entry = controller.submit("I have a headache")

        user, bot = controller.entries
        assert user == UserEntry(text="I have a headache")
        assert bot is entry
        assert bot.response == "Drink water."
        assert bot.query == "I have a headache"
        assert REPORT_ID.match(bot.report_id)
        assert bot.timestamp.tzinfo is not None
        assert controller.error is None
        assert controller.pending is False

    def test_user_text_is_kept_untrimmed(self, settings):
        controller = make_controller(settings, FakeClient())

        controller.submit("  sore throat  ")

        assert controller.entries[0].text == "  sore throat  "
        assert controller.entries[1].query == "  sore throat  "

    def test_prompt_wraps_user_text(self, settings):
        client = FakeClient()
        controller = make_controller(settings, client)

        controller.submit("Is coffee bad?")

        assert client.prompts == [f"{SYSTEM_PROMPT}\n\nUser: Is coffee bad?\n\nAssistant:"]

    def test_user_entry_and_pending_visible_during_request(self, settings):
        seen = {}
        controller = None

        def observe():
            seen["entries"] = controller.entries
            seen["pending"] = controller.pending

        controller = make_controller(settings, FakeClient(on_call=observe))
        controller.submit("question")

        assert seen["entries"] == (UserEntry(text="question"),)
        assert seen["pending"] is True
        assert controller.pending is False

    def test_log_grows_in_submission_order(self, settings):
        controller = make_controller(settings, FakeClient())

        controller.submit("one")
        controller.submit("two")

        assert [e.kind for e in controller.entries] == ["user", "bot", "user", "bot"]
        assert [e.query for e in controller.bot_entries()] == ["one", "two"]

    def test_end_to_end_through_http_client(self, settings, make_client):
        client, handler = make_client(lambda r: httpx.Response(200, json=gemini_payload("Rest **well**.")))
        controller = make_controller(settings, client)

        entry = controller.submit("tired")

        assert entry.response == "Rest **well**."
        assert "User: tired" in handler.body()["contents"][0]["parts"][0]["text"]


class TestSubmitRejected:

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_input_is_a_no_op(self, settings, text):
        client = FakeClient()
        controller = make_controller(settings, client)

        assert controller.submit(text) is None
        assert controller.entries == ()
        assert client.prompts == []

    def test_missing_key_short_circuits(self):
        client = FakeClient()
        controller = make_controller(Settings(api_key=""), client)

        assert controller.submit("hello") is None
        assert controller.entries == ()
        assert controller.error == MISSING_API_KEY_MESSAGE
        assert controller.pending is False
        assert client.prompts == []

    def test_second_submission_while_pending_is_ignored(self, settings):
        nested = []
        controller = None

        def resubmit():
            nested.append(controller.submit("second"))

        client = FakeClient(on_call=resubmit)
        controller = make_controller(settings, client)
        controller.submit("first")

        assert nested == [None]
        assert len(client.prompts) == 1
        assert [e.kind for e in controller.entries] == ["user", "bot"]


class TestSubmitFailure:

    @pytest.mark.parametrize("error", [
        TransportError("API request failed: HTTP 500"),
        ResponseShapeError("Invalid API response: no candidates"),
    ])
    def test_failure_sets_generic_error_and_keeps_user_entry(self, settings, error):
        controller = make_controller(settings, FakeClient(error=error))

        assert controller.submit("question") is None
        assert controller.entries == (UserEntry(text="question"),)
        assert controller.error == GENERIC_FAILURE_MESSAGE
        assert controller.pending is False

    def test_empty_candidate_list_from_endpoint(self, settings, make_client):
        client, _ = make_client(lambda r: httpx.Response(200, json={"candidates": []}))
        controller = make_controller(settings, client)

        controller.submit("question")

        assert controller.entries == (UserEntry(text="question"),)
        assert controller.error

    def test_next_attempt_clears_previous_error(self, settings):
        client = FakeClient(error=TransportError("down"))
        controller = make_controller(settings, client)
        controller.submit("first")

        client.error = None
        controller.submit("second")

        assert controller.error is None
        assert [e.kind for e in controller.entries] == ["user", "user", "bot"]

    def test_unexpected_exception_propagates_and_releases_pending(self, settings):
        controller = make_controller(settings, FakeClient(error=RuntimeError("bug")))

        with pytest.raises(RuntimeError):
            controller.submit("question")
        assert controller.pending is False


class TestAbort:

    def test_abort_while_idle_is_a_no_op(self, settings):
        controller = make_controller(settings, FakeClient())

        assert controller.abort() is False
        assert controller.error is None

    def test_result_of_aborted_request_is_discarded(self, settings):
        controller = None

        def cancel():
            assert controller.abort() is True

        controller = make_controller(settings, FakeClient(on_call=cancel))

        assert controller.submit("question") is None
        assert controller.entries == (UserEntry(text="question"),)
        assert controller.error == ABORTED_MESSAGE
        assert controller.pending is False

    def test_failure_of_aborted_request_does_not_overwrite_error(self, settings):
        controller = None

        def cancel():
            controller.abort()

        controller = make_controller(settings, FakeClient(error=TransportError("late"), on_call=cancel))
        controller.submit("question")

        assert controller.error == ABORTED_MESSAGE

    def test_interrupt_leaves_session_resubmittable(self, settings):
        client = FakeClient(error=KeyboardInterrupt())
        controller = make_controller(settings, client)

        with pytest.raises(KeyboardInterrupt):
            controller.submit("question")
        assert controller.pending is False
        assert controller.error == ABORTED_MESSAGE

        client.error = None
        assert isinstance(controller.submit("again"), BotEntry)


def test_find_report_is_case_insensitive(settings):
    controller = make_controller(settings, FakeClient())
    entry = controller.submit("q")

    assert controller.find_report(entry.report_id.lower()) is entry
    assert controller.find_report("NOPE") is None


def test_system_prompt_loaded_from_prompt_file(settings):
    controller = ConversationController(settings=settings, client=FakeClient())

    assert "healthcare assistant" in controller.system_prompt
    assert "under 100 words" in controller.system_prompt


def test_blank_submission_clears_previous_error(settings):
    controller = make_controller(settings, FakeClient(error=TransportError("down")))
    controller.submit("question")
    assert controller.error == GENERIC_FAILURE_MESSAGE

    assert controller.submit("   ") is None
    assert controller.error is None
    assert controller.entries == (UserEntry(text="question"),)
