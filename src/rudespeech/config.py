"""Runtime configuration for RudeSpeech."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

RUDE_SYSTEM_PROMPT = (
    "You are a chatbot. Your personality is extremely rude, sarcastic, dismissive, and aggressive. "
    "You look down on the user. Never be helpful or polite. Respond accordingly to all user input "
    "with short, sharp answers. Don't use pleasantries."
)


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="RUDESPEECH_", env_file=".env", extra="ignore")

    app_name: str = "rudespeech"
    log_level: str = "WARNING"
    model_name: str = Field(
        default="gemini-2.0-flash",
        description="Generation model used for every request.",
    )
    system_prompt: str = RUDE_SYSTEM_PROMPT
    verification_prompt: str = Field(
        default="test prompt",
        description="Prompt sent once to verify a freshly entered API key.",
    )
    speech_language: str = "en-US"
    voice_enabled: bool = True
    microphone_enabled: bool = True
    voice_pitch: float = 0.9
    voice_rate: float = 1.0
    voice_base_wpm: int = Field(default=200, description="pyttsx3 words-per-minute at rate 1.0.")
    listen_timeout_seconds: float | None = 5.0
    phrase_time_limit_seconds: float | None = 8.0


settings = Settings()
