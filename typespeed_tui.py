from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

try:
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Container
    from textual.logging import TextualHandler
    from textual.widgets import Static
except ModuleNotFoundError as exc:
    missing = getattr(exc, "name", "")
    hint = "python3 -m pip install -U rich textual"
    print(f"Missing dependency '{missing}'. Install with: {hint}", file=sys.stderr)
    raise SystemExit(1) from exc


log = logging.getLogger(__name__)

SAMPLE_TEXT = "The quick brown fox jumps over the lazy dog."

CONFIG_PATH = Path(__file__).resolve().parent / "typespeed_tui.config.json"

DEFAULT_THEME = "slate"

THEMES: Dict[str, Dict[str, str]] = {
    "slate": {
        "panel_bg": "#0b1220",
        "stats_bg": "#0f172a",
        "border": "#1f2937",
        "title": "#e5e7eb",
        "muted": "#64748b",
        "ok": "#86efac",
        "bad": "#fb7185",
        "untyped": "#475569",
    },
    "ember": {
        "panel_bg": "#1a1210",
        "stats_bg": "#21140e",
        "border": "#3b1d14",
        "title": "#fef3c7",
        "muted": "#d6a08a",
        "ok": "#fde68a",
        "bad": "#f87171",
        "untyped": "#7c5a4c",
    },
    "mint": {
        "panel_bg": "#0a1b1f",
        "stats_bg": "#0b1c22",
        "border": "#12323a",
        "title": "#d1fae5",
        "muted": "#7dd3c7",
        "ok": "#5eead4",
        "bad": "#fb7185",
        "untyped": "#3f6b66",
    },
}


# ---------------------------
# Config + logging
# ---------------------------

def load_config(path: Path = CONFIG_PATH) -> Dict[str, object]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("Could not load config from %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring config %s: expected a JSON object", path)
        return {}
    return data


def resolve_palette(config: Dict[str, object]) -> Tuple[str, Dict[str, str]]:
    """
    Pick the palette named by config["theme"].
    Custom themes under config["themes"] are merged over the default palette
    so a partial definition still has every colour.
    """
    palettes = THEMES.copy()
    extra_themes = config.get("themes")
    if isinstance(extra_themes, dict):
        for name, colors in extra_themes.items():
            if isinstance(colors, dict):
                palettes[name] = {**palettes[DEFAULT_THEME], **colors}
    name = str(config.get("theme", DEFAULT_THEME))
    if name not in palettes:
        log.warning("Unknown theme %r, using %r", name, DEFAULT_THEME)
        name = DEFAULT_THEME
    return name, palettes[name]


def configure_logging(level: object = "WARNING") -> None:
    """Send log records to the Textual devtools console instead of the screen."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[TextualHandler()],
    )


# ---------------------------
# Session state
# ---------------------------

@dataclass
class Session:
    sample: str = SAMPLE_TEXT
    typed: str = ""
    start_time: Optional[float] = None
    finished: bool = False
    quit: bool = False


# ---------------------------
# Input handling
# ---------------------------

def is_printable(character: Optional[str]) -> bool:
    return character is not None and len(character) == 1 and character.isprintable()


def try_finish(session: Session) -> None:
    if session.finished:
        return
    if len(session.typed) >= len(session.sample) and session.typed == session.sample:
        session.finished = True
        log.info(
            "Finished: WPM %.1f, accuracy %.1f%%",
            words_per_minute(session),
            accuracy(session),
        )


def handle_key(event, session: Session, now: Optional[float] = None) -> None:
    """
    Apply one key event to the session.

    Escape requests quit, backspace drops the last typed character (even
    after finishing), printable characters are appended until the sample
    is finished. Every other key is ignored.
    """
    key = event.key
    if key == "escape":
        session.quit = True
        return
    if key == "backspace":
        session.typed = session.typed[:-1]
        try_finish(session)
        return
    if not is_printable(event.character):
        return
    if session.finished:
        return
    if session.start_time is None:
        session.start_time = time.time() if now is None else now
        log.debug("Timer started")
    session.typed += event.character
    try_finish(session)


# ---------------------------
# Typing math
# ---------------------------

def elapsed_seconds(session: Session, now: Optional[float] = None) -> float:
    if session.start_time is None:
        return 0.0
    if now is None:
        now = time.time()
    return now - session.start_time


def word_count(sample: str) -> int:
    # rough: doesn't collapse repeated spaces
    return sample.count(" ") + 1


def words_per_minute(session: Session, now: Optional[float] = None) -> float:
    elapsed = elapsed_seconds(session, now)
    if session.start_time is None or elapsed <= 0:
        return 0.0
    return word_count(session.sample) / (elapsed / 60.0)


def accuracy(session: Session) -> float:
    typed = session.typed
    if not typed:
        return 100.0
    good = sum(1 for t, s in zip(typed, session.sample) if t == s)
    return good / len(typed) * 100.0


# ---------------------------
# Rendering
# ---------------------------

def render_sample(session: Session, palette: Dict[str, str]) -> Text:
    text = Text()
    typed = session.typed
    for i, s_char in enumerate(session.sample):
        if i >= len(typed):
            style = palette["untyped"]
        elif typed[i] == s_char:
            style = f"bold {palette['ok']}"
        else:
            style = f"bold {palette['bad']}"
        text.append(s_char, style=style)
    return text


def stats_message(session: Session, now: Optional[float] = None) -> str:
    if session.finished:
        wpm = words_per_minute(session, now)
        return f"Finished! WPM: {wpm:.0f} | Accuracy: {accuracy(session):.1f}%"
    if session.start_time is not None:
        return f"Typing... {elapsed_seconds(session, now):.1f} seconds"
    return "Press any key to start typing!"


def render_stats(session: Session, palette: Dict[str, str], now: Optional[float] = None) -> Text:
    style = f"bold {palette['title']}" if session.finished else palette["muted"]
    return Text(stats_message(session, now), style=style)


# ---------------------------
# UI widgets
# ---------------------------

class SampleView(Static):
    """Sample text, coloured per typed character."""
    pass


class StatsView(Static):
    """Status / stats line."""
    pass


# ---------------------------
# App
# ---------------------------

class TypingTUI(App, inherit_bindings=False):
    CSS = """
    Screen {
        background: transparent;
    }

    #root {
        height: 100%;
        padding: 2;
    }

    SampleView {
        background: #0b1220;
        border: round #1f2937;
        padding: 1 2;
        height: 1fr;
    }

    StatsView {
        background: #0f172a;
        border: round #1f2937;
        padding: 1 2;
        height: 1fr;
    }
    """

    TITLE = "Typing speed test"
    ENABLE_COMMAND_PALETTE = False

    tick_sec: float = 0.1

    def __init__(
        self,
        sample: str = SAMPLE_TEXT,
        config: Optional[Dict[str, object]] = None,
    ) -> None:
        super().__init__()
        self.session = Session(sample=sample)
        self.theme_name, self.palette = resolve_palette(config or {})

    def compose(self) -> ComposeResult:
        with Container(id="root"):
            self.sample_view = SampleView()
            self.stats_view = StatsView()
            yield self.sample_view
            yield self.stats_view

    def on_mount(self) -> None:
        log.info("Starting typing test with theme %r", self.theme_name)
        self.sample_view.border_title = "Type this"
        self.stats_view.border_title = "Stats"
        self.apply_theme()
        self._render_all()
        self.set_interval(self.tick_sec, self._render_all)

    def apply_theme(self) -> None:
        palette = self.palette
        border_def = ("round", palette["border"])
        self.sample_view.styles.background = palette["panel_bg"]
        self.stats_view.styles.background = palette["stats_bg"]
        self.sample_view.styles.border = border_def
        self.stats_view.styles.border = border_def
        self.sample_view.styles.border_title_color = palette["title"]
        self.stats_view.styles.border_title_color = palette["title"]

    def on_key(self, event: events.Key) -> None:
        handle_key(event, self.session)
        self._render_all()
        if self.session.quit:
            log.info("Quit requested")
            self.exit()

    def _render_all(self) -> None:
        self.sample_view.update(render_sample(self.session, self.palette))
        self.stats_view.update(render_stats(self.session, self.palette))


def main() -> int:
    config = load_config()
    configure_logging(config.get("log_level", "WARNING"))
    app = TypingTUI(config=config)
    app.run()
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
