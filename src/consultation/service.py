"""
Consultation service layer: the conversation controller.

Owns the session state (append-only log, pending flag, transient error)
and drives one request/response exchange per user submission.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from src.consultation.models import BotEntry, ConversationEntry, SessionState, UserEntry
from src.consultation.prompts import build_consultation_prompt, get_system_prompt
from utils.exceptions import AppError, ConfigError
from utils.gemini import GeminiClient
from utils.logger import get_logger
from utils.settings import Settings

log = get_logger(__name__)

MISSING_API_KEY_MESSAGE = "API key is not configured"
GENERIC_FAILURE_MESSAGE = "Failed to process your request"
ABORTED_MESSAGE = "Request cancelled"


class ConversationController:
    """
    One instance per chat session.

    Submissions are serialized: while a request is pending, further
    submissions are ignored. Every submission that reaches dispatch ends in
    exactly one of: a BotEntry appended, the transient error set, or the
    request being aborted.
    """

    def __init__(
        self,
        settings: Settings,
        client: GeminiClient | None = None,
        system_prompt: str | None = None,
        state: SessionState | None = None,
    ):
        """
        Args:
            settings: Injected configuration (API key, model, timeout)
            client: Gemini client; built from settings when omitted
            system_prompt: Overrides the prompt file under prompts/
            state: Existing session state to continue
        """
        self.settings = settings
        self.client = client or GeminiClient(settings)
        self.system_prompt = system_prompt if system_prompt is not None else get_system_prompt()
        self.state = state or SessionState()
        self._dispatch_seq = 0
        self._active_seq: Optional[int] = None

    # ---------- read-only view ----------

    @property
    def entries(self) -> Tuple[ConversationEntry, ...]:
        return tuple(self.state.log)

    @property
    def pending(self) -> bool:
        return self.state.pending

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    def has_history(self) -> bool:
        return self.state.has_history()

    def bot_entries(self) -> List[BotEntry]:
        return [e for e in self.state.log if isinstance(e, BotEntry)]

    def find_report(self, report_id: str) -> Optional[BotEntry]:
        wanted = report_id.strip().upper()
        for entry in reversed(self.bot_entries()):
            if entry.report_id == wanted:
                return entry
        return None

    # ---------- exchange ----------

    def submit(self, text: str) -> Optional[BotEntry]:
        """
        Send one user question to the model.

        Returns:
            The appended BotEntry, or None when nothing was appended
            (blank input, busy, missing key, failure, abort).
        """
        if self.state.pending:
            log.warning("Submission ignored: a request is already in flight")
            return None

        self.state.error = None
        if not text.strip():
            return None
        if not self.settings.has_api_key:
            log.error(f"{ConfigError.__name__}: {MISSING_API_KEY_MESSAGE}")
            self.state.error = MISSING_API_KEY_MESSAGE
            return None

        # The user's turn is visible before any network activity.
        self.state.append(UserEntry(text=text))
        self.state.pending = True
        self._dispatch_seq += 1
        seq = self._dispatch_seq
        self._active_seq = seq
        log.info(f"Dispatching request #{seq} to {self.settings.model}")

        try:
            raw = self.client.generate(build_consultation_prompt(text, self.system_prompt))
        except AppError as e:
            return self._fail(seq, e)
        except BaseException:
            # Interrupted mid-flight (Ctrl+C or an unexpected bug): leave the
            # session resubmittable before propagating.
            self.abort()
            raise
        return self._succeed(seq, text, raw)

    def abort(self) -> bool:
        """
        Abandon the in-flight request. Its eventual result is discarded.

        Returns:
            True if a request was pending.
        """
        if not self.state.pending:
            return False
        log.warning(f"Request #{self._active_seq} aborted")
        self._active_seq = None
        self.state.pending = False
        self.state.error = ABORTED_MESSAGE
        return True

    def _is_current(self, seq: int) -> bool:
        if self._active_seq != seq:
            log.info(f"Discarding result of abandoned request #{seq}")
            return False
        return True

    def _succeed(self, seq: int, query: str, raw: str) -> Optional[BotEntry]:
        if not self._is_current(seq):
            return None
        entry = BotEntry(query=query, response=raw.strip())
        self.state.append(entry)
        self._settle()
        log.info(f"Request #{seq} answered, report {entry.report_id}")
        return entry

    def _fail(self, seq: int, exc: AppError) -> None:
        if not self._is_current(seq):
            return None
        # Detail goes to the log; the user only sees the generic message.
        log.error(f"Request #{seq} failed with {type(exc).__name__}: {exc}", exc_info=exc)
        self.state.error = GENERIC_FAILURE_MESSAGE
        self._settle()
        return None

    def _settle(self) -> None:
        self._active_seq = None
        self.state.pending = False
