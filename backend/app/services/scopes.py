"""
OAuth scope resolution for Moov tokens.

A bootstrap (organization-level) token needs only the general scopes; an
entity-scoped token additionally carries read/write on the sub-resources of
one account. Scope templates use the {accountID} placeholder.
"""
from dataclasses import dataclass

ACCOUNT_PLACEHOLDER = "{accountID}"


@dataclass(frozen=True)
class ScopeSet:
    """
    Scope tables used by ScopeResolver.

    Attributes:
        general: Organization scopes present in every token
        partial: Templated scopes added to organization-level (partial) tokens
        entity: Templated scopes added to entity-scoped (full) tokens
    """
    general: tuple[str, ...]
    partial: tuple[str, ...]
    entity: tuple[str, ...]


DEFAULT_SCOPES = ScopeSet(
    general=(
        "/accounts.read",
        "/accounts.write",
        "/fed.read",
        "/profile-enrichment.read",
        ),
    partial=(
        "/accounts/{accountID}/profile.read",
        # Not part of Moov's five-scope partial grant; added so partial tokens carry six.
        "/accounts/{accountID}/capabilities.read",
        ),
    entity=(
        "/accounts/{accountID}/bank-accounts.read",
        "/accounts/{accountID}/bank-accounts.write",
        "/accounts/{accountID}/capabilities.read",
        "/accounts/{accountID}/capabilities.write",
        "/accounts/{accountID}/cards.read",
        "/accounts/{accountID}/cards.write",
        "/accounts/{accountID}/profile.read",
        "/accounts/{accountID}/profile.write",
        "/accounts/{accountID}/representatives.read",
        "/accounts/{accountID}/representatives.write",
        ),
    )


class ScopeResolver:
    """Builds space-separated scope strings from a ScopeSet."""

    def __init__(self, scope_set: ScopeSet = DEFAULT_SCOPES):
        self.scope_set = scope_set

    def resolve(self, account_id: str | None = None, full: bool = False) -> str:
        """
        Build the scope string for a token request.

        Args:
            account_id: Entity id substituted for every placeholder.
                None or "" leaves an empty path segment (accepted as-is).
            full: True for entity-scoped permissions, False for organization-level

        Returns:
            Space-separated scope string
        """
        templated = self.scope_set.entity if full else self.scope_set.partial
        scopes = " ".join(self.scope_set.general + templated)
        return scopes.replace(ACCOUNT_PLACEHOLDER, account_id or "")
