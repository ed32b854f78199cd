"""
Interactive multi-turn chat over the completion API.

Architectural role:
- Terminal alternative to the HTTP adapter; no file handling.
- Keeps the whole conversation in process memory and replays it on every
  request so the model sees prior turns.

Request lifecycle (per user turn):
1. Read one line from stdin.
2. Build messages from the transcript plus the new user turn.
3. Call the completion client with the lower-tier chat model.
4. Print the reply, then append the user and assistant turns.

Control commands:
- `exit` (any case) is still sent to the model; its reply is printed and the
  session ends without extending the transcript.

Error handling strategy:
- `ApiError` prints the upstream code and message, then ends the session.
- EOF and keyboard interrupts end the session without a traceback.
- Blank input is ignored and does not call the API.
"""

from dotenv import load_dotenv

load_dotenv()

import sys
from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape

from askdoc.core.content_types import ASSISTANT_ROLE, USER_ROLE, ChatTurn, PromptMessage
from askdoc.core.errors import ApiError
from askdoc.llm.client import CompletionClient
from askdoc.llm.provider_config import CHAT_MODEL_NAME
from askdoc.llm.service import create_completion_client


EXIT_COMMAND = "exit"
USER_PROMPT = "[yellow]You: [/yellow]"
BOT_LABEL = "[green]Bot: [/green]"


class InteractiveSession:
    """
    One console chat session.

    Args:
        client: Completion client, constructed by the caller.
        model: Model identifier for every call.
        console: Rich console used for output (and input by default).
        read_input: Callable returning the next input line; defaults to
            `console.input` with the `You: ` prompt.
    """

    def __init__(
        self,
        client: CompletionClient,
        model: str = CHAT_MODEL_NAME,
        console: Optional[Console] = None,
        read_input: Optional[Callable[[], str]] = None,
    ):
        self.client = client
        self.model = model
        self.console = console or Console()
        self.read_input = read_input or (lambda: self.console.input(USER_PROMPT))
        self.transcript: List[ChatTurn] = []

    def build_messages(self, user_input: str) -> List[PromptMessage]:
        """Replay the transcript and append the pending user turn."""
        messages = [turn.to_message() for turn in self.transcript]
        messages.append(ChatTurn(USER_ROLE, user_input).to_message())
        return messages

    def ask(self, user_input: str) -> str:
        return self.client.complete(self.model, self.build_messages(user_input))

    def _report_api_error(self, err: ApiError) -> None:
        if err.code:
            self.console.print(f"[red]{escape(err.code)}[/red]")
        self.console.print(f"[red]{escape(err.upstream_message)}[/red]")

    def run(self) -> None:
        self.console.print("[bold green]Welcome to the Chatbot Program![/bold green]")
        self.console.print("[bold green]You can start chatting with the bot.[/bold green]")

        while True:
            try:
                user_input = self.read_input().strip()
            except EOFError:
                self.console.print("\nSession ended.")
                break
            except KeyboardInterrupt:
                self.console.print("\nInterrupted.")
                break

            if not user_input:
                continue

            try:
                reply = self.ask(user_input)
            except ApiError as err:
                self._report_api_error(err)
                break
            except KeyboardInterrupt:
                self.console.print("\nInterrupted.")
                break

            self.console.print(BOT_LABEL + escape(reply))

            if user_input.lower() == EXIT_COMMAND:
                break

            self.transcript.append(ChatTurn(USER_ROLE, user_input))
            self.transcript.append(ChatTurn(ASSISTANT_ROLE, reply))


def main() -> int:
    """Build the client from configuration and run one session."""
    console = Console()
    try:
        client = create_completion_client()
    except RuntimeError as err:
        console.print(f"[bold red]{escape(str(err))}[/bold red]")
        return 1

    InteractiveSession(client, console=console).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
