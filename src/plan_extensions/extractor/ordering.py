"""Dependency-safe ordering of providers."""

from collections.abc import Iterable

from .metadata import ProviderDescriptor


def order_providers(
    providers: Iterable[ProviderDescriptor],
) -> tuple[list[ProviderDescriptor], list[ProviderDescriptor]]:
    """Order providers so condition publishers run before their dependents.

    Declaration order is kept wherever conditions do not force otherwise.
    A requirement nobody in ``providers`` publishes does not constrain order.

    Args:
        providers: Providers of one subject shape

    Returns:
        Tuple of (ordered providers, providers that could not be placed
        because they sit on or behind a condition cycle)
    """
    pending = sorted(providers, key=lambda p: p.declaration_index)

    publishers: dict[str, list[ProviderDescriptor]] = {}
    for provider in pending:
        if provider.condition_name:
            publishers.setdefault(provider.condition_name, []).append(provider)

    ordered: list[ProviderDescriptor] = []
    placed: set[str] = set()

    while pending:
        for provider in pending:
            required = publishers.get(provider.requires_condition or "", [])
            if all(p.method_name in placed for p in required if p is not provider):
                ordered.append(provider)
                placed.add(provider.method_name)
                pending.remove(provider)
                break
        else:
            break

    return ordered, pending
