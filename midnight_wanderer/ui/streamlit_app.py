import base64
import html
import logging
import re

import streamlit as st

from midnight_wanderer.core.errors import ConfigurationError
from midnight_wanderer.core.models import GameState
from midnight_wanderer.core.settings import Settings, load_settings
from midnight_wanderer.services.game_runner import GameRunner
from midnight_wanderer.services.narrative import NarrativeClient, build_narrative_client

logger = logging.getLogger(__name__)

PLAYER_AVATAR = "🧑‍🎓"
NARRATOR_AVATAR = "🦉"
_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|>~<$])")
st.set_page_config(page_title="Hogwarts: Midnight Wanderer", page_icon="🪄", layout="centered")


def set_castle_theme():
    st.markdown("""
    <style>
        body { color: #e2e8f0; background-color: #0f172a; font-family: 'Cinzel', serif; }
        h1 { color: #fde68a; letter-spacing: 0.05em; text-align: center; }
        .location { color: #fef3c7b3; font-style: italic; text-align: center; margin-top: -0.5rem; }
        .stButton>button { color: #0f172a; background-color: #fcd34d; border: none; font-weight: bold; }
        .game-over { border: 2px solid #fcd34d; border-radius: 0.5rem; padding: 1.25rem; text-align: center; background-color: #1e293b; }
        .game-over h3 { color: #fde68a; }
    </style>
    <link href="https://fonts.googleapis.com/css2?family=Cinzel:wght@400;700&display=swap" rel="stylesheet">
    """, unsafe_allow_html=True)


@st.cache_resource
def get_settings() -> Settings:
    settings = load_settings()
    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        level=settings.log_level,
    )
    return settings


@st.cache_resource
def get_narrator(_settings: Settings) -> NarrativeClient:
    return build_narrative_client(_settings)


def image_bytes(data_uri: str) -> bytes:
    return base64.b64decode(data_uri.split(",", 1)[1])


def escape_markdown(text: str) -> str:
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def display_sidebar(settings: Settings):
    st.sidebar.title("Settings")
    st.sidebar.write(f"- **Text backend:** `{settings.text_backend}`")
    model = settings.ollama_model if settings.text_backend == "ollama" else settings.text_model
    st.sidebar.write(f"- **Text model:** `{model}`")
    if settings.enable_images:
        st.sidebar.write(f"- **Image model:** `{settings.image_model}`")
    else:
        st.sidebar.write("- **Images:** disabled")


def display_player_action(text: str):
    with st.chat_message("user", avatar=PLAYER_AVATAR):
        st.markdown(f"*{escape_markdown(text)}*")


def display_log(gs: GameState):
    for t in gs.turns:
        if t.is_player_input:
            display_player_action(t.text)
            continue
        with st.chat_message("assistant", avatar=NARRATOR_AVATAR):
            st.markdown(t.text)
            if t.image:
                st.image(image_bytes(t.image), width="stretch")
    if gs.last_error:
        st.error(f"**Error:** {gs.last_error}")


def play_turn(runner: GameRunner, action: str):
    # the player's line shows while the narrator is still working
    display_player_action(action.strip())
    with st.spinner("Casting a vision..."):
        accepted = runner.submit(action)
    if accepted:
        st.rerun()


def display_game_over(runner: GameRunner):
    gs = runner.state
    st.markdown(
        f"<div class='game-over'><h3>Game Over</h3><p>{html.escape(gs.game_over_reason)}</p></div>",
        unsafe_allow_html=True,
    )
    if st.button("Play Again", width="stretch"):
        with st.spinner("Initializing Magic..."):
            runner.start_adventure()
        st.rerun()


def main():
    try:
        settings = get_settings()
    except ConfigurationError as e:
        st.error(str(e))
        st.stop()

    set_castle_theme()
    display_sidebar(settings)

    # init runner once per browser session
    if "runner" not in st.session_state:
        runner = GameRunner(get_narrator(settings))
        with st.spinner("Initializing Magic..."):
            runner.start_adventure()
        st.session_state.runner = runner
    runner: GameRunner = st.session_state.runner

    placeholder = "The adventure is over." if runner.state.is_game_over else "What do you do?"
    action = st.chat_input(placeholder, disabled=not runner.state.can_submit)

    gs = runner.state
    st.title("Hogwarts: Midnight Wanderer")
    if gs.current_location:
        st.markdown(f"<p class='location'>Location: {html.escape(gs.current_location)}</p>", unsafe_allow_html=True)
    if gs.latest_image:
        st.image(image_bytes(gs.latest_image), caption="The current scene in your Hogwarts adventure",
                 width="stretch")

    display_log(gs)

    if action and action.strip() and gs.can_submit:
        play_turn(runner, action)

    if gs.is_game_over:
        display_game_over(runner)


if __name__ == "__main__":
    main()