import logging

from midnight_wanderer.core.errors import ImageGenerationFailure, NarrativeError
from midnight_wanderer.core.models import GameState, Phase, Turn, TurnResult
from midnight_wanderer.services.narrative import NarrativeClient
from midnight_wanderer.services.prompts import (
    GAME_OVER_PLACEHOLDER,
    IMAGE_FAILURE_MESSAGE,
    OPENING_PROMPT,
    START_FAILURE_MESSAGE,
    TEXT_FAILURE_MESSAGE,
)

logger = logging.getLogger(__name__)


class GameRunner:
    """
    Drives one player's session: sends each action through the narrator
    (text, then image) and folds the reply into `state`.

    Only one turn is ever in flight. `state.is_loading` doubles as the
    lock; a submission made while it is set is dropped, not queued.
    """

    def __init__(self, narrator: NarrativeClient):
        self.narrator = narrator
        self.state: GameState = GameState()

    def start_adventure(self) -> GameState:
        """Reset everything and seed the log with the scripted opening scene."""
        self.state = GameState(is_loading=True)
        self._transition("awaiting_text")
        try:
            result = self.narrator.generate_structured_turn([], OPENING_PROMPT)
        except NarrativeError as e:
            logger.error("Failed to start game: %s", e)
            self.state.last_error = START_FAILURE_MESSAGE
            self._finish()
            return self.state
        except Exception:
            logger.exception("Unexpected error while starting the game")
            self._finish()
            raise
        self._commit(result)
        logger.info("Adventure started at %r", self.state.current_location)
        return self.state

    def submit(self, player_input: str) -> bool:
        """
        Play one turn. Returns False when the submission is ignored
        (blank input, a turn already in flight, or the game is over).
        """
        action = player_input.strip()
        if not action:
            return False
        if self.state.is_loading:
            logger.debug("Dropped submission while a turn is in flight: %r", action)
            return False
        if self.state.is_game_over:
            return False

        history = list(self.state.turns)
        self.state.turns.append(Turn(text=action, is_player_input=True))
        self.state.is_loading = True
        self.state.last_error = None
        self._transition("awaiting_text")
        try:
            result = self.narrator.generate_structured_turn(history, action)
        except NarrativeError as e:
            logger.warning("Game logic failed: %s", e)
            self._rollback()
            return True
        except Exception:
            logger.exception("Unexpected error while generating a turn")
            self._rollback()
            raise
        self._commit(result)
        return True

    # ——— transitions ——————————————————————————————————————

    def _transition(self, phase: Phase) -> None:
        logger.debug("Phase %s -> %s", self.state.phase, phase)
        self.state.phase = phase

    def _finish(self) -> None:
        self._transition("idle")
        self.state.is_loading = False

    def _commit(self, result: TurnResult) -> None:
        self._transition("awaiting_image")
        image = self.narrator.generate_scene_image(result.image_prompt, on_failure=self._on_image_failure)
        self.state.turns.append(Turn(text=result.scene_description, image=image))
        self.state.current_location = result.location
        self.state.turn += 1
        if result.is_game_over:
            self.state.is_game_over = True
            self.state.game_over_reason = (result.game_over_reason or "").strip() or GAME_OVER_PLACEHOLDER
            logger.info("Game over after %d turns: %s", self.state.turn, self.state.game_over_reason)
        self._finish()

    def _rollback(self) -> None:
        self._transition("failed")
        # the optimistic player turn is always the last entry
        self.state.turns.pop()
        self.state.last_error = TEXT_FAILURE_MESSAGE
        self._finish()

    def _on_image_failure(self, failure: ImageGenerationFailure) -> None:
        logger.warning("Committing turn without an image: %s", failure)
        self.state.last_error = IMAGE_FAILURE_MESSAGE
