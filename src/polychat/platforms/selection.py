"""Interactive platform, region and model choice."""

from collections.abc import Awaitable, Callable, Sequence

from ..errors import CatalogUnavailableError, SelectionCancelledError
from ..protocols import Selector
from .models import PlatformSelection, ProviderSpec
from .registry import ProviderRegistry

ListModels = Callable[[ProviderSpec], Awaitable[list[str]]]


def choose(selector: Selector, items: Sequence[str], prompt: str, what: str) -> str:
    """Ask ``selector`` for one of ``items``.

    Raises:
        SelectionCancelledError: If nothing was chosen
    """
    index = selector.select(items, prompt)
    if index is None or not 0 <= index < len(items):
        raise SelectionCancelledError(f"no {what} selected")
    return items[index]


async def select_platform(
    registry: ProviderRegistry,
    platform_key: str | None,
    model_name: str | None,
    selector: Selector,
    list_models: ListModels,
) -> PlatformSelection:
    """Resolve a platform and model, prompting for whatever is missing.

    Without ``platform_key`` the user picks a platform and then always picks
    a model from its catalog. With a key but no model, the primary provider
    falls back to its configured default model; other providers list their
    catalog for the user to choose from. Multi-region providers ask for a
    region.

    Args:
        registry: Provider table
        platform_key: Provider name, or None to ask
        model_name: Model name, or None to ask
        selector: External chooser
        list_models: Catalog fetcher for a single provider

    Returns:
        PlatformSelection describing the choice

    Raises:
        ProviderNotFoundError: If ``platform_key`` is unknown
        SelectionCancelledError: If the user dismissed a prompt
        CatalogUnavailableError: If the catalog came back empty
    """
    platform_changed = False
    if not platform_key:
        platform_key = choose(selector, registry.names(), "platform: ", "platform")
        platform_changed = True

    spec = registry.get(platform_key)

    candidates = registry.candidates(platform_key)
    base_url = registry.pinned_url(platform_key) or candidates[0]
    if len(candidates) > 1:
        base_url = choose(selector, candidates, "region: ", "region")

    final_model = model_name or ""
    if not final_model and not platform_changed:
        final_model = registry.default_model(platform_key) or ""

    models: list[str] = []
    if platform_changed or not final_model:
        models = await list_models(spec)
        if not models:
            raise CatalogUnavailableError("no models found or returned in unexpected format")
        final_model = choose(selector, models, "model: ", "model")

    return PlatformSelection(
        platform=platform_key,
        model=final_model,
        base_url=base_url,
        credential_env=spec.credential_env,
        models=models,
    )
