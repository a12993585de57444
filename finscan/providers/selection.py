from finscan.config.settings import Settings

GEMINI = "gemini"
OPENAI = "openai"
EXAMPLE = "example"

PROVIDERS = (GEMINI, OPENAI, EXAMPLE)


def select_provider(settings: Settings) -> str:
    """Pick the AI provider by configuration precedence.

    An explicit ``ai_provider`` wins; otherwise Gemini when its API key is
    configured, else OpenAI. Pure: reads settings only.
    """
    explicit = settings.ai_provider.strip().lower()
    if explicit:
        if explicit not in PROVIDERS:
            raise ValueError(f"Unknown AI provider '{explicit}'. Choose from: {list(PROVIDERS)}")
        return explicit
    if settings.gemini_api_key.strip():
        return GEMINI
    return OPENAI
