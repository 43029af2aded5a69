"""
cli.py - command line front end for the chatter engine
Commands:
- chat   interactive loop: every line is learned from and answered
- say    learn from one message and print a reply
- train  learn from text files, one message per line
- stats  size of the lexicon
- config show or change options
Uses Rich for prompts, tables and panels.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.markup import escape
from rich.text import Text

from babbler import __version__
from babbler.context import Tokenizer, clean_message, is_mentioned
from babbler.core.chatbot import Chatbot
from babbler.utils.config_manager import Config
from babbler.utils.logger_utils import Log, configure_logging

logger = logging.getLogger(__name__)

console = Console()


class CLI:
    """Interactive session: owns the chatbot, tokenizer and config."""

    def __init__(self, config: Config, listen_only: bool = False, mention_only: Optional[bool] = None):
        self.cfg = config
        self.bot = Chatbot.from_config(config)
        self.tokenizer = Tokenizer()
        self.bot_name = config.get("bot_name", "")
        self.listen_only = listen_only
        # group-chat rule: only answer when @bot_name appears in the message
        if mention_only is None:
            mention_only = bool(config.get("mention_only", False))
        self.mention_only = mention_only and bool(self.bot_name)
        self.running = True

    def tokens_for(self, text: str) -> List[str]:
        return self.tokenizer(clean_message(text, self.bot_name))

    def run(self):
        """
        Main loop:
        - prompts for a message
        - slash commands are handled, everything else is learned + answered
        """
        console.rule("[bold magenta]babbler[/bold magenta]")
        console.print("[cyan]Talk to me. I learn from everything you say.[/cyan]")
        console.print("Commands: /quit /stats /save /next WORD /listen\n")

        while self.running:
            try:
                line = Prompt.ask("[green]You[/green]", default="", console=console)
            except (EOFError, KeyboardInterrupt):
                self._exit()
                break
            if not line.strip():
                continue
            if line.startswith("/"):
                self._handle_command(line.strip())
                continue
            reply = self.process(line)
            if reply:
                console.print(Text.assemble(("Bot", "bold cyan"), ": ", reply))

    def process(self, text: str, respond: Optional[bool] = None) -> Optional[str]:
        logger.info(f"[user] {text}")
        tokens = self.tokens_for(text)
        if respond is None:
            respond = self.should_reply(text)
        return self.bot.handle(tokens, respond=respond)

    def should_reply(self, text: str) -> bool:
        if self.listen_only:
            return False
        if self.mention_only:
            return is_mentioned(text, self.bot_name)
        return True

    # COMMANDS ----------------------------------------------------------------
    def _handle_command(self, cmd: str):
        name, _, arg = cmd.partition(" ")
        if name == "/quit":
            self._exit()
        elif name == "/stats":
            show_stats(self.bot)
        elif name == "/save":
            if self.bot.save():
                console.print("[green]Lexicon saved.[/green]")
            else:
                console.print("[red]Save failed, see log.[/red]")
        elif name == "/next":
            self._show_next(arg.strip())
        elif name == "/listen":
            self.listen_only = not self.listen_only
            state = "listening only" if self.listen_only else "replying"
            console.print(f"[yellow]Now {state}.[/yellow]")
        else:
            console.print(f"[red]Unknown command:[/red] {cmd}")

    def _show_next(self, word: str):
        if not word:
            console.print("[red]Usage:[/red] /next WORD")
            return
        assoc = self.bot.store.lookup(word)
        if not assoc:
            console.print(f"[dim](nothing follows '{escape(word)}')[/dim]")
            return
        total = sum(assoc.values())
        table = Table(title=f"After '{escape(word)}'", box=box.SIMPLE, show_edge=False)
        table.add_column("Next", style="bold")
        table.add_column("Weight", justify="right", style="magenta")
        table.add_column("P", justify="right", style="cyan")
        for w, c in sorted(assoc.items(), key=lambda kv: (-kv[1], kv[0]))[:20]:
            table.add_row(Text(w), str(c), f"{c / total:.3f}")
        console.print(table)

    def _exit(self):
        console.rule("[red]Exiting[/red]")
        self.bot.flush()
        self.running = False


def show_stats(bot: Chatbot):
    st = bot.store.stats()
    t = Table(title="Lexicon", box=box.MINIMAL)
    t.add_column("Metric", style="cyan")
    t.add_column("Value", style="white", justify="right")
    t.add_row("Words", str(st.words))
    t.add_row("Transitions", str(st.transitions))
    t.add_row("Total weight", str(st.total_weight))
    t.add_row("File", bot.store.path)
    console.print(t)


# SUBCOMMANDS -------------------------------------------------------------------
def cmd_chat(args, cfg: Config) -> int:
    CLI(cfg, listen_only=args.listen, mention_only=True if args.group else None).run()
    return 0


def cmd_say(args, cfg: Config) -> int:
    cli = CLI(cfg)
    reply = cli.process(" ".join(args.text))
    cli.bot.flush()
    if reply is None:
        console.print("[dim](no reply)[/dim]")
        return 1
    console.print(reply, markup=False, highlight=False)
    return 0


def cmd_train(args, cfg: Config) -> int:
    cli = CLI(cfg)
    # one save at the end instead of one per line
    cli.bot.learner.save_every = sys.maxsize
    lines = transitions = 0
    with Log.time_block("training", logger):
        for path in args.files:
            try:
                with open(path, "r", encoding="utf-8") as fh:
                    for raw in fh:
                        if not raw.strip():
                            continue
                        transitions += cli.bot.hear(cli.tokens_for(raw))
                        lines += 1
            except OSError as e:
                console.print(f"[red]Cannot read {path}:[/red] {e}")
                # keep what earlier files taught us
                cli.bot.flush()
                return 1
    saved = cli.bot.flush()
    console.print(
        Panel(
            f"{lines} lines, {transitions} transitions learned"
            + ("" if saved or not transitions else " (save failed)"),
            title="Training done",
            border_style="cyan",
        )
    )
    return 0 if saved or not transitions else 1


def cmd_stats(args, cfg: Config) -> int:
    show_stats(Chatbot.from_config(cfg))
    return 0


def cmd_config(args, cfg: Config) -> int:
    if args.key is not None:
        if args.value is None:
            console.print("[red]Usage:[/red] config KEY VALUE")
            return 2
        try:
            cfg.set(args.key, args.value)
        except (KeyError, ValueError) as e:
            console.print(f"[red]{e}[/red]")
            return 2
    t = Table(title=f"Config ({cfg.path})", box=box.SIMPLE)
    t.add_column("Option", style="cyan")
    t.add_column("Value")
    for k, v in cfg.items():
        t.add_row(k, repr(v))
    console.print(t)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="babbler", description="Markov chatter that learns as it talks.")
    p.add_argument("--config", default="config.json", help="path to JSON config file")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = p.add_subparsers(dest="command")

    chat = sub.add_parser("chat", help="interactive session (default)")
    chat.add_argument("--listen", action="store_true", help="learn without replying")
    chat.add_argument("--group", action="store_true", help="reply only when @bot_name is mentioned")
    chat.set_defaults(func=cmd_chat)

    say = sub.add_parser("say", help="learn from TEXT and print one reply")
    say.add_argument("text", nargs="+")
    say.set_defaults(func=cmd_say)

    train = sub.add_parser("train", help="learn from text files, one message per line")
    train.add_argument("files", nargs="+")
    train.set_defaults(func=cmd_train)

    stats = sub.add_parser("stats", help="show lexicon size")
    stats.set_defaults(func=cmd_stats)

    conf = sub.add_parser("config", help="show or set an option")
    conf.add_argument("key", nargs="?")
    conf.add_argument("value", nargs="?")
    conf.set_defaults(func=cmd_config)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = Config(args.config)
    configure_logging(cfg.get("log_level", "INFO"), cfg.get("log_path"))
    if args.command is None:
        args.listen = False
        args.group = False
        args.func = cmd_chat
    return args.func(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
