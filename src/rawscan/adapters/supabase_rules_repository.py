"""Supabase repository for the rules catalog."""

from dataclasses import dataclass

from supabase import Client

from rawscan.domain.rules import RuleDefinition
from rawscan.services.rules_catalog import RulesRepository, rule_from_row


@dataclass
class SupabaseRulesRepository(RulesRepository):
    """Reads rules_catalog rows in declared order."""

    client: Client

    def list_rules(self) -> list[RuleDefinition]:
        """Return every rule ordered by id."""
        response = self.client.table("rules_catalog").select("*").order("id").execute()
        return [rule_from_row(row) for row in response.data or []]
