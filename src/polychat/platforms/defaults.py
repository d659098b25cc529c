"""Built-in provider table."""

from .models import CatalogAuth, CatalogSpec, ProviderSpec

PRIMARY_PROVIDER = "openai"

DEFAULT_PROVIDERS: dict[str, ProviderSpec] = {
    "openai": ProviderSpec(
        name="openai",
        base_urls=["https://api.openai.com/v1"],
        credential_env="OPENAI_API_KEY",
        catalog=CatalogSpec(url="https://api.openai.com/v1/models", json_path="data.id"),
    ),
    "groq": ProviderSpec(
        name="groq",
        base_urls=["https://api.groq.com/openai/v1"],
        credential_env="GROQ_API_KEY",
        catalog=CatalogSpec(url="https://api.groq.com/openai/v1/models", json_path="data.id"),
    ),
    "deepseek": ProviderSpec(
        name="deepseek",
        base_urls=["https://api.deepseek.com"],
        credential_env="DEEP_SEEK_API_KEY",
        catalog=CatalogSpec(url="https://api.deepseek.com/models", json_path="data.id"),
    ),
    "anthropic": ProviderSpec(
        name="anthropic",
        base_urls=["https://api.anthropic.com/v1/"],
        credential_env="ANTHROPIC_API_KEY",
        catalog=CatalogSpec(
            url="https://api.anthropic.com/v1/models",
            json_path="data.id",
            auth=CatalogAuth.API_KEY_HEADER,
            headers={"anthropic-version": "2023-06-01"},
        ),
    ),
    "xai": ProviderSpec(
        name="xai",
        base_urls=["https://api.x.ai/v1"],
        credential_env="XAI_API_KEY",
        catalog=CatalogSpec(url="https://api.x.ai/v1/models", json_path="data.id"),
    ),
    "ollama": ProviderSpec(
        name="ollama",
        base_urls=["http://localhost:11434/v1"],
        credential_env="ollama",
        requires_credential=False,
        catalog=CatalogSpec(
            url="http://localhost:11434/api/tags",
            json_path="models.name",
            auth=CatalogAuth.NONE,
        ),
    ),
    "together": ProviderSpec(
        name="together",
        base_urls=["https://api.together.xyz/v1"],
        credential_env="TOGETHER_API_KEY",
        catalog=CatalogSpec(url="https://api.together.xyz/v1/models", json_path="id"),
    ),
    "google": ProviderSpec(
        name="google",
        base_urls=["https://generativelanguage.googleapis.com/v1beta/openai/"],
        credential_env="GEMINI_API_KEY",
        catalog=CatalogSpec(
            url="https://generativelanguage.googleapis.com/v1beta/models",
            json_path="models.name",
            auth=CatalogAuth.QUERY,
        ),
    ),
    "mistral": ProviderSpec(
        name="mistral",
        base_urls=["https://api.mistral.ai/v1"],
        credential_env="MISTRAL_API_KEY",
        catalog=CatalogSpec(url="https://api.mistral.ai/v1/models", json_path="data.id"),
    ),
    "amazon": ProviderSpec(
        name="amazon",
        base_urls=[
            "https://bedrock-runtime.us-west-2.amazonaws.com/openai/v1",
            "https://bedrock-runtime.us-east-1.amazonaws.com/openai/v1",
            "https://bedrock-runtime.us-east-2.amazonaws.com/openai/v1",
            "https://bedrock-runtime.eu-west-1.amazonaws.com/openai/v1",
        ],
        credential_env="AWS_BEDROCK_API_KEY",
        catalog=CatalogSpec(
            url="https://bedrock.us-west-2.amazonaws.com/foundation-models",
            json_path="modelSummaries.modelId",
        ),
    ),
}
