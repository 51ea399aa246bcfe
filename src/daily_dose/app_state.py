"""Application state - one controller per concern, wired once at startup."""

import logging
from dataclasses import dataclass

from daily_dose.config import Settings, get_settings
from daily_dose.llm import LLMClient, OpenAIClient
from daily_dose.persistence import AppStore, KeyValueStore, create_store
from daily_dose.services import (
    AuthController,
    FeedController,
    NutritionService,
    PetController,
    SignupPrompter,
)

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything a request handler needs. Passed explicitly, never global to services."""

    settings: Settings
    store: AppStore
    nutrition: NutritionService
    pets: PetController
    feed: FeedController
    auth: AuthController
    signup: SignupPrompter

    @property
    def review_mode(self) -> bool:
        return not self.nutrition.configured


def create_app_state(
    settings: Settings | None = None,
    *,
    kv: KeyValueStore | None = None,
    llm: LLMClient | None = None,
) -> AppState:
    settings = settings or get_settings()
    store = create_store(settings, kv=kv)

    if settings.review_mode and llm is None:
        logger.warning("LLM_API_KEY is missing. Running in review mode; plans will not compute.")
    nutrition = NutritionService(
        llm
        or OpenAIClient(
            api_key=settings.llm_api_key or None,
            base_url=settings.llm_base_url,
            model=settings.llm_model,
        ),
        api_key_present=llm is not None or not settings.review_mode,
        timeout_seconds=settings.llm_timeout_seconds,
    )

    # auth is bound below; the prompter only reads it once a plan is ready
    signup = SignupPrompter(
        lambda: auth.has_session(),
        delay_seconds=settings.signup_prompt_delay_seconds,
    )
    auth = AuthController(store, on_session_start=signup.satisfied)

    pets = PetController(
        store,
        nutrition,
        max_pets=settings.max_pets,
        on_ready=signup.notify_ready,
    )
    feed = FeedController(store, settings.admin_passphrase)
    return AppState(
        settings=settings,
        store=store,
        nutrition=nutrition,
        pets=pets,
        feed=feed,
        auth=auth,
        signup=signup,
    )
