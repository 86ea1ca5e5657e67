from mindjournal.config import GroqCredentials, HuggingFaceCredentials, Settings


def test_missing_keys_mean_no_credentials():
    settings = Settings(HF_API_KEY="", GROQ_API_KEY="   ")
    assert settings.classifier_credentials() is None
    assert settings.generator_credentials() is None


def test_credentials_carry_shared_timeout_and_model_options():
    settings = Settings(
        HF_API_KEY=" hf_abc ",
        HF_MODEL_URL="https://inference.test/emotion",
        GROQ_API_KEY="gsk_abc",
        GROQ_MODEL="test-model",
        AI_TIMEOUT_SECONDS=3.5,
        SUGGESTION_MAX_TOKENS=80,
        SUGGESTION_TEMPERATURE=0.2,
    )

    assert settings.classifier_credentials() == HuggingFaceCredentials(
        api_key="hf_abc", model_url="https://inference.test/emotion", timeout_seconds=3.5
    )
    assert settings.generator_credentials() == GroqCredentials(
        api_key="gsk_abc", model="test-model", timeout_seconds=3.5, max_tokens=80, temperature=0.2
    )
